"""Pitch classes and pitch-class arithmetic.

This module provides the `Pitch` enumeration and the helpers used to move
between note names, pitch classes and intervals.

Module-level constants:
- `NOTE_NAME_TO_PITCH`: Maps note names (e.g., `"C"`, `"F#"`, `"Bb"`) to `Pitch` members
- `PITCH_ORDERING`: The twelve canonical pitch classes in ascending order

Module-level helpers:
- `pitch_from_interval(tonic, interval)`: Transpose a pitch class by a signed interval.
- `parse_pitch(name)`: Validate a user-supplied pitch name and return its `Pitch`.
  Raises `ValueError` for unknown names.

Enharmonic spellings are enum aliases, so ``Pitch.ASHARP is Pitch.BFLAT`` and all
interval arithmetic treats them as one pitch class.
"""

import enum
import typing


NOTES_IN_AN_OCTAVE = 12


class Pitch (enum.Enum):

	"""
	An octave-independent pitch class, valued by its offset from C.
	"""

	C = 0
	CSHARP = 1
	DFLAT = 1
	D = 2
	DSHARP = 3
	EFLAT = 3
	E = 4
	F = 5
	FSHARP = 6
	GFLAT = 6
	G = 7
	GSHARP = 8
	AFLAT = 8
	A = 9
	ASHARP = 10
	BFLAT = 10
	B = 11


	@property
	def offset (self) -> int:

		"""Semitones above C (0-11)."""

		return typing.cast(int, self.value)


	def name_text (self) -> str:

		"""
		Return a human-friendly name using sharps (e.g. ``"F#"``).
		"""

		return PC_TO_NOTE_NAME[self.offset]


# Aliases are excluded from enum iteration, leaving one member per pitch class.
PITCH_ORDERING: typing.List[Pitch] = list(Pitch)

NOTE_NAME_TO_PITCH: typing.Dict[str, Pitch] = {
	"C": Pitch.C,
	"C#": Pitch.CSHARP,
	"Db": Pitch.DFLAT,
	"D": Pitch.D,
	"D#": Pitch.DSHARP,
	"Eb": Pitch.EFLAT,
	"E": Pitch.E,
	"F": Pitch.F,
	"F#": Pitch.FSHARP,
	"Gb": Pitch.GFLAT,
	"G": Pitch.G,
	"G#": Pitch.GSHARP,
	"Ab": Pitch.AFLAT,
	"A": Pitch.A,
	"A#": Pitch.ASHARP,
	"Bb": Pitch.BFLAT,
	"B": Pitch.B,
}

PC_TO_NOTE_NAME: typing.List[str] = [
	"C",
	"C#",
	"D",
	"D#",
	"E",
	"F",
	"F#",
	"G",
	"G#",
	"A",
	"A#",
	"B",
]


def pitch_from_interval (tonic: Pitch, interval: int) -> Pitch:

	"""Return the pitch class ``interval`` semitones away from ``tonic``.

	The interval may be negative or larger than an octave; the result wraps
	around the twelve pitch classes.

	Example:
		```python
		pitch_from_interval(Pitch.C, 7)        # → Pitch.G
		pitch_from_interval(Pitch.C, -1)       # → Pitch.B
		pitch_from_interval(Pitch.BFLAT, 2)    # → Pitch.C
		```
	"""

	return PITCH_ORDERING[(tonic.offset + interval) % NOTES_IN_AN_OCTAVE]


def parse_pitch (name: str) -> Pitch:

	"""Validate a pitch name and return its `Pitch`.

	Accepts conventional spellings (``"C"``, ``"F#"``, ``"Bb"``, ``"A♯"``) in any
	letter case, as well as the enum member names (``"ASHARP"``, ``"bflat"``).

	Raises:
		ValueError: If the name is not recognised.
	"""

	text = name.strip().replace("♯", "#").replace("♭", "b")

	if text:
		conventional = text[0].upper() + text[1:].lower()
		if conventional in NOTE_NAME_TO_PITCH:
			return NOTE_NAME_TO_PITCH[conventional]

		if text.upper() in Pitch.__members__:
			return Pitch.__members__[text.upper()]

	raise ValueError(
		f"Unknown pitch name: {name!r}. Expected e.g. 'C', 'F#', 'Bb' or 'ASHARP'."
	)
