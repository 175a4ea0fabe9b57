import pytest

import polyphony.chords
import polyphony.scales


Scale = polyphony.scales.Scale


def test_profiles_have_twelve_entries () -> None:

	for scale in Scale:
		assert len(scale.consonance_profile) == 12
		assert len(scale.chord_profile) == 12


def test_tonic_triads_match_the_scale () -> None:

	"""Degree 0 carries the scale's own triad quality."""

	assert Scale.MAJOR.chord_profile[0] is polyphony.chords.ChordType.MAJOR_TRIAD
	assert Scale.MINOR.chord_profile[0] is polyphony.chords.ChordType.MINOR_TRIAD
	assert Scale.MAJOR.triad_type is polyphony.chords.ChordType.MAJOR_TRIAD
	assert Scale.MINOR.triad_type is polyphony.chords.ChordType.MINOR_TRIAD


def test_tonic_and_fifth_are_most_consonant () -> None:

	for scale in Scale:
		profile = scale.consonance_profile
		assert profile[0] == max(profile)
		assert profile[7] == max(profile)


@pytest.mark.parametrize("name, expected", [
	("MAJOR", Scale.MAJOR),
	("major", Scale.MAJOR),
	("Minor", Scale.MINOR),
])
def test_parse_scale (name: str, expected: polyphony.scales.Scale) -> None:

	assert polyphony.scales.parse_scale(name) is expected


def test_parse_scale_rejects_unknown () -> None:

	with pytest.raises(ValueError, match="Unknown scale"):
		polyphony.scales.parse_scale("dorian")
