"""Scales and their harmonic profiles.

A scale owns two twelve-entry profiles, indexed by the interval (in semitones)
of a scale degree above the key's tonic:

- a **consonance profile**: an integer fitness score for each degree. Positive
  values are consonant with the tonic, negative values dissonant.
- a **chord profile**: the triad quality built on each degree.

The profiles blend western common-practice harmony with taste; they are data
consumed by :mod:`polyphony.harmony`, not derived from anything.
"""

import enum
import typing

import polyphony.chords


MAJOR_TRIAD = polyphony.chords.ChordType.MAJOR_TRIAD
MINOR_TRIAD = polyphony.chords.ChordType.MINOR_TRIAD

MAJOR_CONSONANCE: typing.Tuple[int, ...] = (4, -3, 1, -3, 1, 2, -3, 4, -3, 1, 1, -3)
MINOR_CONSONANCE: typing.Tuple[int, ...] = (4, -3, 1, 2, -3, 2, -3, 4, 1, -3, 2, -3)

MAJOR_CHORDS: typing.Tuple[polyphony.chords.ChordType, ...] = (
	MAJOR_TRIAD, MINOR_TRIAD, MINOR_TRIAD, MAJOR_TRIAD, MINOR_TRIAD, MAJOR_TRIAD, MINOR_TRIAD, MAJOR_TRIAD, MINOR_TRIAD, MINOR_TRIAD, MAJOR_TRIAD, MINOR_TRIAD
)

MINOR_CHORDS: typing.Tuple[polyphony.chords.ChordType, ...] = (
	MINOR_TRIAD, MAJOR_TRIAD, MAJOR_TRIAD, MAJOR_TRIAD, MINOR_TRIAD, MINOR_TRIAD, MAJOR_TRIAD, MINOR_TRIAD, MAJOR_TRIAD, MINOR_TRIAD, MAJOR_TRIAD, MINOR_TRIAD
)

# How consonant each interval above a chord's own root sounds, by triad quality.
CONSONANCE_BY_CHORD_TYPE: typing.Dict[polyphony.chords.ChordType, typing.Tuple[int, ...]] = {
	MAJOR_TRIAD: MAJOR_CONSONANCE,
	MINOR_TRIAD: MINOR_CONSONANCE,
}


class Scale (enum.Enum):

	"""
	A key's mode, carrying its consonance and chord profiles.
	"""

	MAJOR = (MAJOR_CONSONANCE, MAJOR_CHORDS, MAJOR_TRIAD)
	MINOR = (MINOR_CONSONANCE, MINOR_CHORDS, MINOR_TRIAD)


	def __init__ (
		self,
		consonance_profile: typing.Tuple[int, ...],
		chord_profile: typing.Tuple[polyphony.chords.ChordType, ...],
		triad_type: polyphony.chords.ChordType
	) -> None:

		self.consonance_profile = consonance_profile
		self.chord_profile = chord_profile
		self.triad_type = triad_type


def parse_scale (name: str) -> Scale:

	"""Validate a scale name (``"major"`` or ``"minor"``, any case) and return its `Scale`.

	Raises:
		ValueError: If the name is not recognised.
	"""

	key = name.strip().upper()

	if key not in Scale.__members__:
		raise ValueError(f"Unknown scale: {name!r}. Available: {sorted(Scale.__members__)}")

	return Scale.__members__[key]
