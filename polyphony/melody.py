"""Melodic rhythm generated by a random-branching L-system.

Melody strings are instructions for a small turtle-like interpreter
(see :meth:`polyphony.notator.Token.render`):

- ``F`` play a note with the current duration and chord degree
- ``d`` / ``D`` halve / double the current duration
- ``+`` / ``-`` move the chord degree up / down one chord tone
- ``[`` / ``]`` save / restore the duration and chord degree

The axiom holds one whole-bar ``F`` per bar. The rules only rewrite ``F``:
most of the time a note is kept as it is; otherwise it is split into two
shorter notes a chord tone or more apart, optionally inside a branch so the
state snaps back afterwards. Rules with a ``+`` or ``-`` in their left context
continue or answer the preceding melodic direction.
"""

import logging
import random
import typing

import polyphony.constants.pulses
import polyphony.lsystem


logger = logging.getLogger(__name__)

NOTE = "F"
HALVE = "d"
DOUBLE = "D"
UP = "+"
DOWN = "-"
PUSH = "["
POP = "]"

# Rewrite attempts per step before the source string is kept unchanged.
MAX_ATTEMPTS = 20


def _rule (successor: str, left: str = "", weight: int = 1) -> polyphony.lsystem.Rule:

	return polyphony.lsystem.Rule(letter=NOTE, successor=successor, left=left, weight=weight)


MELODY_RULES: typing.Tuple[polyphony.lsystem.Rule, ...] = (
	_rule("F", weight=26),
	_rule("dFFD"),
	_rule("[dFF]"),
	_rule("d-F+FD"),
	_rule("[d-F+F]"),
	_rule("d+F-FD"),
	_rule("[d+F-F]"),
	_rule("Fd+F-FD", left="F"),
	_rule("[Fd+F-F]", left="F"),
	_rule("Fd-F+FD", left="F"),
	_rule("[Fd-F+F]", left="F"),
	_rule("Fd++F-FD", left="F+"),
	_rule("[Fd++F-F]", left="F+"),
	_rule("Fd+++F--FD", left="F+"),
	_rule("[Fd+++F--F]", left="F+"),
	_rule("Fd-F++FD", left="F+"),
	_rule("[Fd-F++F]", left="F+"),
	_rule("Fd--F+++FD", left="F+"),
	_rule("[Fd--F+++F]", left="F+"),
	_rule("-Fd++F-FD", left="F-"),
	_rule("[-Fd++F-F]", left="F-"),
	_rule("-Fd+++F--FD", left="F-"),
	_rule("[-Fd+++F--F]", left="F-"),
	_rule("-Fd-F++FD", left="F-"),
	_rule("[-Fd-F++F]", left="F-"),
	_rule("-Fd--F+++FD", left="F-"),
	_rule("[-Fd--F+++F]", left="F-"),
)


def melody_axiom (bars: int) -> str:

	"""Return the starting string for a melody ``bars`` bars long: one whole-bar note per bar."""

	if bars <= 0:
		raise ValueError("Melody length must be positive")

	return NOTE * bars


def is_valid (text: str, start_duration: int = polyphony.constants.pulses.BAR_LENGTH) -> bool:

	"""Return True if ``text`` can be rendered without subdividing a tick.

	Only the duration symbols are simulated. A string is rejected when it halves
	a duration that cannot be split into whole ticks (a one-tick note, or any odd
	duration), or when it restores a state that was never saved.
	"""

	duration = start_duration
	stack: typing.List[int] = []

	for symbol in text:

		if symbol == HALVE:
			if duration % 2 != 0 or duration // 2 < polyphony.constants.pulses.MIN_DURATION:
				return False
			duration //= 2

		elif symbol == DOUBLE:
			duration *= 2

		elif symbol == PUSH:
			stack.append(duration)

		elif symbol == POP:
			if not stack:
				return False
			duration = stack.pop()

	return True


class MelodyGrammar (polyphony.lsystem.LSystem):

	"""
	The melody L-system for one phrase, rejecting rewrites that cannot be rendered.
	"""

	def __init__ (
		self,
		bars: int,
		rng: typing.Optional[random.Random] = None
	) -> None:

		"""
		Initialize a grammar whose axiom spans ``bars`` whole-bar notes.
		"""

		super().__init__(melody_axiom(bars), MELODY_RULES, context_sensitive=True, rng=rng)

		self.bars = bars


	def rewrite (self, source: str) -> str:

		"""Rewrite ``source`` until the result is valid, giving up after ``MAX_ATTEMPTS`` tries.

		When every attempt is invalid, ``source`` itself is returned.
		"""

		for _ in range(MAX_ATTEMPTS):

			result = super().rewrite(source)

			if is_valid(result):
				return result

		logger.debug(f"No valid rewrite after {MAX_ATTEMPTS} attempts; keeping {len(source)} symbols")

		return source
