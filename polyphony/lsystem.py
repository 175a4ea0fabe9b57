"""A stochastic, context-sensitive L-system.

Each rewriting pass walks the *current* string one position at a time. Every
rule whose letter matches the character at that position (and, when context
sensitivity is on, whose left and right context match the text immediately
around it) is a candidate. One candidate is drawn at random, weighted by the
rules' relative weights, and its successor replaces the character. Positions
with no candidates copy their character through unchanged, so punctuation and
other symbols outside the grammar survive every pass.

Context is read-only: it decides whether a rule fires but is never replaced.
"""

import dataclasses
import logging
import random
import typing


logger = logging.getLogger(__name__)

OptionType = typing.TypeVar("OptionType")


@dataclasses.dataclass(frozen=True)
class Rule:

	"""
	A weighted production ``left < letter > right → successor``.

	Attributes:
		letter: The single character this rule rewrites.
		successor: The text substituted for ``letter``.
		left: Text that must immediately precede ``letter`` (empty = any).
		right: Text that must immediately follow ``letter`` (empty = any).
		weight: Relative likelihood against other rules matching the same position.
	"""

	letter: str
	successor: str
	left: str = ""
	right: str = ""
	weight: int = 1


	def __post_init__ (self) -> None:

		if len(self.letter) != 1:
			raise ValueError(f"Rule letter must be a single character, got {self.letter!r}")

		if self.weight <= 0:
			raise ValueError("Weight must be positive")


	def matches (self, source: str, index: int, context_sensitive: bool = True) -> bool:

		"""Return True if this rule can rewrite ``source[index]``.

		A context window that would run past either end of ``source`` does not match.
		"""

		if source[index] != self.letter:
			return False

		if not context_sensitive:
			return True

		if self.left:
			start = index - len(self.left)
			if start < 0 or source[start:index] != self.left:
				return False

		if self.right:
			end = index + 1 + len(self.right)
			if end > len(source) or source[index + 1:end] != self.right:
				return False

		return True


def choose_weighted (options: typing.Sequence[typing.Tuple[OptionType, int]], rng: random.Random) -> OptionType:

	"""
	Choose one item from a list of weighted options.

	Draws a value in ``[0, total)`` and returns the first option whose cumulative
	weight exceeds it.
	"""

	if not options:
		raise ValueError("Options cannot be empty")

	total_weight = 0

	for _, weight in options:
		if weight <= 0:
			raise ValueError("Weights must be positive")
		total_weight += weight

	roll = rng.random() * total_weight
	accum = 0

	for option, weight in options:
		accum += weight
		if roll < accum:
			return option

	return options[-1][0]


class LSystem:

	"""
	A string-rewriting grammar with weighted, optionally context-sensitive rules.
	"""

	def __init__ (
		self,
		axiom: str,
		rules: typing.Iterable[Rule],
		context_sensitive: bool = True,
		rng: typing.Optional[random.Random] = None
	) -> None:

		"""
		Initialize the system at its axiom.

		Parameters:
			axiom: The starting string, restored by :meth:`reset`.
			rules: The production rules. Order matters only for reproducibility:
				candidates are weighed in the order given here.
			context_sensitive: When False, rules fire on their letter alone.
			rng: Random source for rule selection (a fresh unseeded one by default).
		"""

		self.axiom = axiom
		self.rules: typing.Tuple[Rule, ...] = tuple(rules)
		self.context_sensitive = context_sensitive
		self.rng = rng or random.Random()

		self.current = axiom
		self.iteration = 0


	def candidates (self, source: str, index: int) -> typing.List[Rule]:

		"""Return every rule that can rewrite ``source[index]``."""

		character = source[index]

		return [
			rule for rule in self.rules
			if rule.letter == character and rule.matches(source, index, self.context_sensitive)
		]


	def rewrite (self, source: str) -> str:

		"""
		Apply one rewriting pass to ``source`` and return the result.

		This does not change the system's current string.
		"""

		parts: typing.List[str] = []

		for index, character in enumerate(source):

			options = self.candidates(source, index)

			if not options:
				parts.append(character)
				continue

			rule = choose_weighted([(rule, rule.weight) for rule in options], self.rng)
			parts.append(rule.successor)

		return "".join(parts)


	def step (self) -> str:

		"""
		Rewrite the current string once and return the new current string.
		"""

		self.current = self.rewrite(self.current)
		self.iteration += 1

		logger.debug(f"Iteration {self.iteration}: {len(self.current)} symbols")

		return self.current


	def iterate (self, count: int) -> str:

		"""Step ``count`` times and return the resulting string."""

		if count < 0:
			raise ValueError("Iteration count cannot be negative")

		for _ in range(count):
			self.step()

		return self.current


	def reset (self) -> None:

		"""
		Return to the axiom and clear the iteration count.
		"""

		self.current = self.axiom
		self.iteration = 0
