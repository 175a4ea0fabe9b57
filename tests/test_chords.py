import pytest

import polyphony.chords
import polyphony.pitches


Pitch = polyphony.pitches.Pitch
ChordType = polyphony.chords.ChordType


def _chord (tonic: polyphony.pitches.Pitch = Pitch.C, chord_type: polyphony.chords.ChordType = ChordType.MAJOR_TRIAD) -> polyphony.chords.Chord:

	return polyphony.chords.Chord(tonic, chord_type)


def test_triad_patterns_close_the_octave () -> None:

	"""Each triad pattern spans exactly one octave."""

	assert ChordType.MAJOR_TRIAD.pattern == (4, 3, 5)
	assert ChordType.MINOR_TRIAD.pattern == (3, 4, 5)

	for chord_type in ChordType:
		assert sum(chord_type.pattern) == 12


def test_from_symbol () -> None:

	assert ChordType.from_symbol("M") is ChordType.MAJOR_TRIAD
	assert ChordType.from_symbol("m") is ChordType.MINOR_TRIAD

	with pytest.raises(ValueError):
		ChordType.from_symbol("x")


@pytest.mark.parametrize("degree, expected", [
	(0, 48),
	(1, 52),
	(2, 55),
	(3, 60),
	(4, 64),
	(-1, 43),
	(-2, 40),
	(-3, 36),
	(-4, 31),
])
def test_note_at_walks_c_major (degree: int, expected: int) -> None:

	"""Degrees walk up and down the C major triad from C in octave 4."""

	assert _chord().note_at(degree, 4) == expected


def test_note_at_minor_triad () -> None:

	"""A minor: A C E."""

	chord = _chord(Pitch.A, ChordType.MINOR_TRIAD)

	assert [chord.note_at(degree, 3) for degree in range(4)] == [45, 48, 52, 57]


def test_note_at_uses_tonic_pitch_class () -> None:

	"""The tonic offset is added before the octave."""

	assert _chord(Pitch.BFLAT).note_at(0, 5) == 70


def test_note_at_folds_high_notes_down_by_octaves () -> None:

	"""Notes above 127 move down whole octaves, keeping their pitch class."""

	chord = _chord(Pitch.B)
	note = chord.note_at(0, 11)

	assert note <= polyphony.chords.MAX_MIDI
	assert note % 12 == 11
	assert note == 119


def test_note_at_folds_low_notes_up_by_octaves () -> None:

	"""Notes below 0 move up whole octaves, keeping their pitch class."""

	note = _chord(Pitch.D).note_at(-5, 0)

	assert note >= 0
	assert (note - 2) % 12 in (0, 4, 7)


def test_note_at_stays_in_midi_range () -> None:

	"""No degree/octave combination leaves [0, 127]."""

	for tonic in polyphony.pitches.PITCH_ORDERING:
		for chord_type in ChordType:
			chord = _chord(tonic, chord_type)
			for octave in (-2, 0, 3, 6, 10, 12):
				for degree in range(-100, 101):
					note = chord.note_at(degree, octave)
					assert 0 <= note <= 127


def test_chord_name () -> None:

	assert _chord(Pitch.C).name() == "C"
	assert _chord(Pitch.BFLAT, ChordType.MINOR_TRIAD).name() == "A#m"
