"""Triad definitions and the `Chord` class.

Module-level constants:
- `MAX_MIDI`: The highest MIDI note number a chord may return
- `CHORD_SUFFIX`: Maps chord types to human-readable suffixes (e.g. `"m"`)

A chord's interval pattern lists the semitone steps between consecutive chord
tones, closing the octave: a major triad is ``(4, 3, 5)`` (root → third → fifth →
octave). Walking the pattern cyclically yields every chord tone in every octave.
"""

import dataclasses
import enum
import math
import typing

import polyphony.pitches


MIN_MIDI = 0
MAX_MIDI = 127


class ChordType (enum.Enum):

	"""
	A triad quality, carrying its token symbol and interval pattern.
	"""

	MAJOR_TRIAD = ("M", (4, 3, 5))
	MINOR_TRIAD = ("m", (3, 4, 5))


	def __init__ (self, symbol: str, pattern: typing.Tuple[int, ...]) -> None:

		self.symbol = symbol
		self.pattern = pattern


	@classmethod
	def from_symbol (cls, symbol: str) -> "ChordType":

		"""Return the chord type written as ``symbol`` in a chord token (``"M"`` or ``"m"``)."""

		for chord_type in cls:
			if chord_type.symbol == symbol:
				return chord_type

		raise ValueError(f"Unknown chord symbol: {symbol!r}")


CHORD_SUFFIX: typing.Dict[ChordType, str] = {
	ChordType.MAJOR_TRIAD: "",
	ChordType.MINOR_TRIAD: "m",
}


@dataclasses.dataclass(frozen=True)
class Chord:

	"""
	The harmony sounding over one span of time: a tonic pitch class and a triad type.
	"""

	tonic: polyphony.pitches.Pitch
	chord_type: ChordType


	@property
	def pattern (self) -> typing.Tuple[int, ...]:

		"""The interval pattern of this chord's triad type."""

		return self.chord_type.pattern


	def note_at (self, degree: int, octave: int) -> int:

		"""Return the MIDI note for a chord degree in a given octave.

		Degree 0 is the tonic. Positive degrees walk up the interval pattern,
		negative degrees walk down it, wrapping cyclically, so degree 3 of a
		triad is the tonic an octave higher and degree -1 is the fifth below.
		Notes that fall outside the MIDI range are moved by whole octaves until
		they fit.

		Parameters:
			degree: Signed number of chord-tone steps from the tonic.
			octave: Octave number; octave 0 holds MIDI notes 0-11.

		Returns:
			MIDI note number in ``[0, 127]``.

		Example:
			```python
			chord = Chord(Pitch.C, ChordType.MAJOR_TRIAD)
			chord.note_at(0, 4)    # → 48 (C)
			chord.note_at(2, 4)    # → 55 (G)
			chord.note_at(-1, 4)   # → 43 (G below)
			```
		"""

		note = self.tonic.offset
		pattern = self.pattern
		size = len(pattern)

		if degree >= 0:
			for step in range(degree):
				note += pattern[step % size]

		else:
			for step in range(-degree):
				note -= pattern[(-step - 1) % size]

		note += octave * polyphony.pitches.NOTES_IN_AN_OCTAVE

		if note < MIN_MIDI:
			note += math.ceil((MIN_MIDI - note) / polyphony.pitches.NOTES_IN_AN_OCTAVE) * polyphony.pitches.NOTES_IN_AN_OCTAVE

		elif note > MAX_MIDI:
			note -= math.ceil((note - MAX_MIDI) / polyphony.pitches.NOTES_IN_AN_OCTAVE) * polyphony.pitches.NOTES_IN_AN_OCTAVE

		return note


	def name (self) -> str:

		"""
		Return a human-friendly chord name (e.g. ``"A#m"``).
		"""

		return f"{self.tonic.name_text()}{CHORD_SUFFIX[self.chord_type]}"
