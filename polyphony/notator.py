"""Structured polyphonic composition from a phrase-structure string.

A structure string such as ``"abab"`` names the phrases of a piece: every
distinct character becomes a `Token` (one phrase with its own length, chords
and four melodies) and every occurrence of that character replays the same
token. The harmony for all tokens comes from one progression grown by the
harmony grammar; each voice's melody in each token comes from its own melody
grammar. Rendering walks each melody string with a small state machine and
writes timed notes to one track per voice, then closes the piece on the
tonic chord.

Randomness is drawn from a single ``random.Random`` in a fixed order, so a
seeded generator reproduces a piece exactly:

1. one phrase length per token, in order of first appearance
2. the harmony grammar's rule choices
3. per token, per voice: the iteration count, then the melody rewrites
4. one cadence chord degree per voice
"""

import collections
import dataclasses
import logging
import random
import typing

import polyphony.chords
import polyphony.constants.pulses
import polyphony.harmony
import polyphony.melody
import polyphony.pitches
import polyphony.scales
import polyphony.sequence


logger = logging.getLogger(__name__)

MIN_PHRASE_LENGTH = 1
MAX_PHRASE_LENGTH = 4
MIN_MELODY_ITERATIONS = 2
MAX_MELODY_ITERATIONS = 7
MIN_OCTAVE = 3
NUMBER_OF_VOICES = 4
CADENCE_BARS = 2

BAR_LENGTH = polyphony.constants.pulses.BAR_LENGTH
QUARTER_LENGTH = polyphony.constants.pulses.TICKS_PER_QUARTER


class RenderingError (Exception):

	"""Raised when a melody string restores a state that was never saved."""


@dataclasses.dataclass
class Voice:

	"""
	One line of the polyphony: its register and the track it writes to.

	Attributes:
		index: Position among the voices; selects the voice's melody in each token.
		octave: Octave passed to :meth:`polyphony.chords.Chord.note_at`.
		track: Output track, assigned when a sequence is generated.
	"""

	index: int
	octave: int
	track: typing.Optional[polyphony.sequence.Track] = None


@dataclasses.dataclass
class RenderState:

	"""The interpreter state saved by ``[`` and restored by ``]``."""

	duration: int
	degree: int


@dataclasses.dataclass
class Token:

	"""
	A distinct phrase of the piece, reused wherever its character occurs.

	Attributes:
		symbol: The structure-string character this token stands for.
		length: Phrase length in bars.
		chords: One chord per quarter note of the phrase.
		melodies: One melody string per voice.
	"""

	symbol: str
	length: int = 0
	chords: typing.List[polyphony.chords.Chord] = dataclasses.field(default_factory=list)
	melodies: typing.List[str] = dataclasses.field(default_factory=list)


	@property
	def length_ticks (self) -> int:

		return self.length * BAR_LENGTH


	def render (self, voice: Voice, offset: int) -> None:

		"""Write this phrase's melody for ``voice`` to its track, starting at tick ``offset``.

		Each ``F`` takes the chord sounding at the quarter note where the note
		starts. A melody that runs past the end of the phrase keeps cycling
		through the phrase's chords.

		Raises:
			RenderingError: On ``]`` without a matching ``[``.
		"""

		if voice.track is None:
			raise ValueError(f"Voice {voice.index} has no track")

		melody = self.melodies[voice.index]

		elapsed = 0
		chord: typing.Optional[polyphony.chords.Chord] = None
		chord_index = 0
		last_quarter = -1

		state = RenderState(duration=BAR_LENGTH, degree=0)
		stack: typing.List[RenderState] = []

		for symbol in melody:

			if symbol == polyphony.melody.NOTE:

				while elapsed // QUARTER_LENGTH > last_quarter:
					chord = self.chords[chord_index % len(self.chords)]
					chord_index += 1
					last_quarter += 1

				assert chord is not None
				voice.track.add_note(chord.note_at(state.degree, voice.octave), offset + elapsed, state.duration)
				elapsed += state.duration

			elif symbol == polyphony.melody.UP:
				state.degree += 1

			elif symbol == polyphony.melody.DOWN:
				state.degree -= 1

			elif symbol == polyphony.melody.HALVE:
				state.duration //= 2

			elif symbol == polyphony.melody.DOUBLE:
				state.duration *= 2

			elif symbol == polyphony.melody.PUSH:
				stack.append(dataclasses.replace(state))

			elif symbol == polyphony.melody.POP:
				if not stack:
					raise RenderingError(f"Unmatched ']' in melody for token {self.symbol!r}, voice {voice.index}")
				state = stack.pop()


def analyse_structure (structure: str) -> typing.Tuple[typing.List[Token], typing.List[int]]:

	"""Split a structure string into distinct tokens and the order they are played in.

	Returns:
		The tokens in order of first appearance, and one token index per
		character of ``structure``.

	Example:
		```python
		tokens, order = analyse_structure("abca")
		[t.symbol for t in tokens]   # → ["a", "b", "c"]
		order                        # → [0, 1, 2, 0]
		```
	"""

	if not structure:
		raise ValueError("Structure string cannot be empty")

	indices: typing.Dict[str, int] = {}
	tokens: typing.List[Token] = []
	order: typing.List[int] = []

	for character in structure:

		if character not in indices:
			indices[character] = len(tokens)
			tokens.append(Token(symbol=character))

		order.append(indices[character])

	return tokens, order


class Notator:

	"""
	Composes a piece from a tonic, a scale and a structure string.

	All generation happens in the constructor, cadence included, so
	:meth:`generate_sequence` renders the same notes every time it is called.
	"""

	def __init__ (
		self,
		tonic: polyphony.pitches.Pitch,
		scale: polyphony.scales.Scale,
		structure: str,
		rng: typing.Optional[random.Random] = None,
		voices: int = NUMBER_OF_VOICES,
		min_octave: int = MIN_OCTAVE
	) -> None:

		"""
		Analyse the structure and generate the harmony and melodies of every token.

		Parameters:
			tonic: Key of the piece.
			scale: Scale of the piece.
			structure: One character per phrase; repeated characters repeat phrases.
			rng: Random source for every decision (a fresh unseeded one by default).
			voices: Number of voices.
			min_octave: Octave of the lowest voice; each further voice is an octave higher.
		"""

		if voices <= 0:
			raise ValueError("Number of voices must be positive")

		self.tonic = tonic
		self.scale = scale
		self.structure = structure
		self.rng = rng or random.Random()

		self.voices: typing.List[Voice] = [
			Voice(index=index, octave=min_octave + index) for index in range(voices)
		]

		self.tokens, self.token_order = analyse_structure(structure)

		for token in self.tokens:
			token.length = self.rng.randint(MIN_PHRASE_LENGTH, MAX_PHRASE_LENGTH)

		self.total_bars = sum(token.length for token in self.tokens)

		logger.info(
			f"Structure {structure!r}: {len(self.tokens)} phrases, "
			+ ", ".join(f"{token.symbol!r}={token.length} bars" for token in self.tokens)
		)

		self.progression, chords = polyphony.harmony.generate_progression(tonic, scale, self.total_bars, self.rng)

		self._assign_chords(chords)
		self._generate_melodies()

		chord = self.cadence_chord()
		self.cadence_degrees: typing.List[int] = [self.rng.randrange(len(chord.pattern)) for _ in self.voices]


	def _assign_chords (self, chords: typing.List[polyphony.chords.Chord]) -> None:

		"""Deal the progression out to the tokens, one quarter note per chord, in order of first appearance."""

		queue = collections.deque(chords)

		for token in self.tokens:
			count = token.length * polyphony.constants.pulses.QUARTERS_IN_A_BAR
			token.chords = [queue.popleft() for _ in range(count)]


	def _generate_melodies (self) -> None:

		for token in self.tokens:

			token.melodies = []

			for voice in self.voices:

				grammar = polyphony.melody.MelodyGrammar(token.length, self.rng)
				iterations = self.rng.randint(MIN_MELODY_ITERATIONS, MAX_MELODY_ITERATIONS)

				token.melodies.append(grammar.iterate(iterations))

				logger.debug(f"Token {token.symbol!r} voice {voice.index}: {iterations} iterations, {token.melodies[-1]}")


	def cadence_chord (self) -> polyphony.chords.Chord:

		"""Return the closing chord: the tonic triad of the piece's scale."""

		return polyphony.chords.Chord(self.tonic, self.scale.triad_type)


	def generate_sequence (self) -> polyphony.sequence.Sequence:

		"""Render every phrase occurrence and the closing chord into a new sequence."""

		sequence = polyphony.sequence.Sequence(ticks_per_beat=QUARTER_LENGTH)

		for voice in self.voices:
			voice.track = sequence.create_track(f"Voice {voice.index + 1}")

		offset = 0

		for token_index in self.token_order:

			token = self.tokens[token_index]

			for voice in self.voices:
				token.render(voice, offset)

			offset += token.length_ticks

		chord = self.cadence_chord()

		for voice, degree in zip(self.voices, self.cadence_degrees):

			assert voice.track is not None
			voice.track.add_note(chord.note_at(degree, voice.octave), offset, BAR_LENGTH * CADENCE_BARS)

		logger.info(f"Rendered {len(self.token_order)} phrases, {offset // BAR_LENGTH + CADENCE_BARS} bars")

		return sequence


def compose (
	tonic: typing.Union[str, polyphony.pitches.Pitch],
	scale: typing.Union[str, polyphony.scales.Scale],
	structure: str,
	seed: typing.Optional[int] = None,
	rng: typing.Optional[random.Random] = None
) -> polyphony.sequence.Sequence:

	"""Compose a piece and return its four-voice sequence.

	Parameters:
		tonic: A `Pitch` or a pitch name (e.g. ``"C"``, ``"Bb"``, ``"ASHARP"``).
		scale: A `Scale` or its name (``"major"`` / ``"minor"``).
		structure: Phrase structure, e.g. ``"abab"``.
		seed: Seed for a new random source. Ignored when ``rng`` is given.
		rng: Random source to draw every decision from.

	Example:
		```python
		sequence = compose("C", "major", "aba", seed=42)
		sequence.save("piece.mid")
		```
	"""

	if isinstance(tonic, str):
		tonic = polyphony.pitches.parse_pitch(tonic)

	if isinstance(scale, str):
		scale = polyphony.scales.parse_scale(scale)

	if rng is None:
		rng = random.Random(seed)

	return Notator(tonic, scale, structure, rng=rng).generate_sequence()
