"""Chord progressions grown by an L-system.

A progression is written as a string of three-character **chord tokens**:
two digits for the 1-based scale degree (semitones above the key's tonic,
plus one) and one character for the triad quality. ``"01M"`` is a major triad
on the tonic; ``"08M"`` is a major triad on the dominant.

The harmony grammar has one rule per acceptable chord-to-chord move. Each rule
fires on the quality character of a token whose two degree digits match the
rule's left context, and appends a second token after it:

    01M  →  01M 06M        (context "01", letter "M", successor "M06M")

Every pass therefore doubles the number of chords, each chord being followed
by a harmonically plausible neighbour, weighted towards consonant moves.
"""

import logging
import random
import typing

import polyphony.chords
import polyphony.constants.pulses
import polyphony.lsystem
import polyphony.pitches
import polyphony.scales


logger = logging.getLogger(__name__)

CHORD_TOKEN_LENGTH = 3

# Two quarter notes on the dominant, closing every piece with an authentic cadence.
CADENCE_DEGREE = 7
CADENCE_LENGTH = 2


class HarmonyError (Exception):

	"""Raised when a harmony grammar cannot fill the requested progression length."""


def chord_token (degree: int, chord_type: polyphony.chords.ChordType) -> str:

	"""Return the token for a triad ``degree`` semitones above the tonic (e.g. ``"08M"``)."""

	if degree < 0 or degree >= polyphony.pitches.NOTES_IN_AN_OCTAVE:
		raise ValueError(f"Scale degree out of range: {degree}")

	return f"{degree + 1:02d}{chord_type.symbol}"


CADENCE = chord_token(CADENCE_DEGREE, polyphony.chords.ChordType.MAJOR_TRIAD) * CADENCE_LENGTH


def transition_score (scale: polyphony.scales.Scale, first: int, second: int) -> int:

	"""Score the move from the chord on degree ``first`` to the chord on degree ``second``.

	The score adds how consonant ``second`` sounds against ``first``'s own triad
	to how consonant ``second`` is within the key. Moves scoring below 1 are
	rejected by :func:`build_rules`.
	"""

	interval = (second - first) % polyphony.pitches.NOTES_IN_AN_OCTAVE
	profile = polyphony.scales.CONSONANCE_BY_CHORD_TYPE[scale.chord_profile[first]]

	return profile[interval] + scale.consonance_profile[second]


def build_rules (scale: polyphony.scales.Scale) -> typing.List[polyphony.lsystem.Rule]:

	"""Build one rule per acceptable chord-to-chord move in ``scale``.

	Rules are produced in ascending order of (first degree, second degree).
	"""

	rules: typing.List[polyphony.lsystem.Rule] = []
	degrees = range(polyphony.pitches.NOTES_IN_AN_OCTAVE)

	for first in degrees:

		first_token = chord_token(first, scale.chord_profile[first])

		for second in degrees:

			score = transition_score(scale, first, second)

			if score < 1:
				continue

			second_token = chord_token(second, scale.chord_profile[second])

			# The degree digits are left context, so they pass through unchanged.
			rules.append(polyphony.lsystem.Rule(
				letter = first_token[2],
				successor = first_token[2] + second_token,
				left = first_token[:2],
				weight = score
			))

	return rules


def transition_text (rule: polyphony.lsystem.Rule) -> str:

	"""Return the text a harmony rule leaves in place of its chord token (two tokens)."""

	return rule.left + rule.successor


def build_grammar (scale: polyphony.scales.Scale, rng: typing.Optional[random.Random] = None) -> polyphony.lsystem.LSystem:

	"""Return the harmony L-system for ``scale``, starting from its tonic chord."""

	axiom = chord_token(0, scale.chord_profile[0])

	return polyphony.lsystem.LSystem(axiom, build_rules(scale), context_sensitive=True, rng=rng)


def required_length (total_bars: int) -> int:

	"""Return the length of progression text to grow before the cadence is appended."""

	if total_bars <= 0:
		raise ValueError("Total length must be positive")

	quarters = total_bars * polyphony.constants.pulses.QUARTERS_IN_A_BAR

	return (quarters - CADENCE_LENGTH) * CHORD_TOKEN_LENGTH


def grow_progression (grammar: polyphony.lsystem.LSystem, length: int) -> str:

	"""Grow chord-token text of exactly ``length`` characters, then append the cadence.

	Each run resets the grammar and steps it until the next string would no
	longer fit in the remaining space; the longest string that fit is appended.
	Runs repeat until the text is full.

	Raises:
		HarmonyError: If a run produces nothing that fits, or the grammar stops
			growing before any string fits.
	"""

	progression = ""

	while len(progression) < length:

		grammar.reset()
		best = ""

		while True:

			text = grammar.step()

			if len(progression) + len(text) > length or len(text) <= len(best):
				break

			best = text

		if not best:
			raise HarmonyError(
				f"Harmony grammar cannot fill {length - len(progression)} more characters "
				f"(progression so far: {len(progression)} of {length})"
			)

		logger.debug(f"Harmony run added {len(best) // CHORD_TOKEN_LENGTH} chords")
		progression += best

	return progression + CADENCE


def decode_progression (text: str, tonic: polyphony.pitches.Pitch) -> typing.List[polyphony.chords.Chord]:

	"""Convert chord-token text into one `Chord` per token, in the key of ``tonic``."""

	if len(text) % CHORD_TOKEN_LENGTH != 0:
		raise ValueError(f"Progression length {len(text)} is not a whole number of chord tokens")

	chords: typing.List[polyphony.chords.Chord] = []

	for start in range(0, len(text), CHORD_TOKEN_LENGTH):

		token = text[start:start + CHORD_TOKEN_LENGTH]

		if not token[:2].isdigit():
			raise ValueError(f"Malformed chord token: {token!r}")

		interval = int(token[:2]) - 1
		chord_type = polyphony.chords.ChordType.from_symbol(token[2])

		chords.append(polyphony.chords.Chord(polyphony.pitches.pitch_from_interval(tonic, interval), chord_type))

	return chords


def generate_progression (
	tonic: polyphony.pitches.Pitch,
	scale: polyphony.scales.Scale,
	total_bars: int,
	rng: typing.Optional[random.Random] = None
) -> typing.Tuple[str, typing.List[polyphony.chords.Chord]]:

	"""Generate a progression of one chord per quarter note across ``total_bars`` bars.

	Returns:
		The chord-token text and the decoded chords, which always end with two
		major chords on the dominant.
	"""

	grammar = build_grammar(scale, rng)
	text = grow_progression(grammar, required_length(total_bars))

	logger.info(f"Harmony: {len(text) // CHORD_TOKEN_LENGTH} chords for {total_bars} bars")

	return text, decode_progression(text, tonic)
