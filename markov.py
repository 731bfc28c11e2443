"""Babble Bot Markov chain text generator."""

import asyncio
import logging
import random
import sys
from collections.abc import Sequence
from typing import Final, TypeVar

import corpus

logger = logging.getLogger(__name__)

DefaultOrder: Final[int] = 2
MaxWords: Final[int] = 200
Terminals: Final[tuple[str, ...]] = (".", "!", "?")

T = TypeVar("T")


class EmptyPoolError(IndexError):
	"""Exception raised when sampling from an empty pool."""

	def __init__(self, *, pool: str = "sequence") -> None:
		"""
		IndexError wrapper.

		Args:
			pool (str): What was being sampled from (default is "sequence")

		"""
		super().__init__(f"Cannot sample from an empty {pool}")


class OrderError(ValueError):
	"""Exception raised when a chain is given an unusable order."""

	def __init__(self, order: object) -> None:
		"""
		ValueError wrapper.

		Args:
			order (object): The rejected order

		"""
		super().__init__(
			f"Markov chain order must be a positive integer, not {order!r}",
		)


class MaxWordsError(ValueError):
	"""Exception raised when a sentence is capped below one word."""

	def __init__(self, max_words: int) -> None:
		"""
		ValueError wrapper.

		Args:
			max_words (int): The rejected word cap

		"""
		super().__init__(f"max_words must be at least 1, not {max_words}")


def sample(items: Sequence[T]) -> T:
	"""
	Pick one element of a sequence uniformly at random.

	Selection is uniform over positions rather than distinct values, so a
	value stored n times is n times as likely to be picked. The transition
	table relies on this to weight continuations by frequency.

	Args:
		items (Sequence[T]): The non-empty sequence to pick from

	Raises:
		EmptyPoolError: If items is empty.

	Returns:
		T: The chosen element.

	"""
	if not items:
		raise EmptyPoolError
	return random.choice(items)


class MarkovChain:
	"""
	Fixed-order, word-level Markov chain.

	The chain is append-only: sentences can be added at any time, but nothing
	is ever removed. Once training is done, the chain can be sampled any
	number of times.

	Each training sentence is walked with a window of order + 1 words. The
	context key for a window is its first word and its second-to-last word,
	joined by a space, and the window's last word is recorded as a
	continuation of that key. With order 2 this is a plain two-word context.
	With order 1 the window holds two words and the key is the first word
	repeated ("a a"), so generation only continues through contexts where
	a word follows itself.

	Attributes:
		order (int): The number of preceding words per window, minus the
			continuation itself
		beginnings (list[list[str]]): The first order + 1 words of every
			sentence long enough to train on
		freq (dict[str, list[str]]): Every continuation observed for each
			context key, duplicates included

	Methods:
		add_sentence(sentence):
			Trains the chain on a single sentence
		add_text(text):
			Splits text into sentences and trains on each of them
		generate_sentence(max_words=MaxWords):
			Builds a new sentence by walking the chain
		next_word_for(words):
			Samples the word that follows the last two words
		sample_frequencies():
			Renders a random context key and its continuations
		get_longest_chain():
			Finds the context key with the most continuations

	"""

	def __init__(self, order: int = DefaultOrder) -> None:
		"""
		Create a new, untrained MarkovChain.

		Args:
			order (int): The "memory" of the chain (default is DefaultOrder)

		Raises:
			OrderError: If order is not a positive integer.

		"""
		if isinstance(order, bool) or not isinstance(order, int) or order < 1:
			raise OrderError(order)
		self._order = order
		self.beginnings: list[list[str]] = []
		self.freq: dict[str, list[str]] = {}

	@property
	def order(self) -> int:
		"""The order the chain was built with; fixed at construction."""
		return self._order

	def __len__(self) -> int:
		"""Return the number of distinct context keys."""
		return len(self.freq)

	def __repr__(self) -> str:
		"""Summarize the chain's order and size."""
		return (
			f"MarkovChain(order={self._order}, "
			f"beginnings={len(self.beginnings)}, contexts={len(self.freq)})"
		)

	def add_sentence(self, sentence: str) -> bool:
		"""
		Train the chain on one sentence.

		Lone apostrophes are dropped along with empty tokens; they are left
		behind when contractions get split up by upstream cleanup. A sentence
		of order words or fewer cannot fill a window and is skipped.

		Args:
			sentence (str): The sentence to learn from

		Returns:
			bool: Whether the sentence was long enough to be learned.

		"""
		words = [w for w in sentence.split() if w != "'"]
		if len(words) <= self._order:
			logger.debug("Skipping short sentence: %r", sentence)
			return False

		self.beginnings.append(words[:self._order + 1])

		buf: list[str] = []
		for word in words:
			buf.append(word)
			if len(buf) == self._order + 1:
				key = f"{buf[0]} {buf[-2]}"
				if key not in self.freq:
					self.freq[key] = []
				self.freq[key].append(buf[-1])
				buf.pop(0)
		return True

	def add_text(self, text: str) -> int:
		"""
		Train the chain on a block of text.

		Args:
			text (str): Raw text, possibly spanning multiple lines

		Returns:
			int: The number of sentences that were long enough to learn.

		"""
		learned = sum(
			self.add_sentence(s) for s in corpus.split_sentences(text)
		)
		logger.info(
			"Learned %i sentences; chain now has %i beginnings"
			" and %i contexts.",
			learned,
			len(self.beginnings),
			len(self.freq),
		)
		return learned

	def next_word_for(self, words: Sequence[str]) -> str | None:
		"""
		Sample the word that follows a pair of words.

		Only the last two words are looked up, so a whole sentence can be
		passed in. Context keys always hold two words, so a shorter sequence
		never matches one.

		Args:
			words (Sequence[str]): The most recent words, oldest first

		Returns:
			str | None: A continuation, chosen with probability proportional
				to how often it was observed; None if the pair has never
				been seen.

		"""
		if (key := " ".join(words[-2:])) in self.freq:
			return sample(self.freq[key])
		return None

	def generate_sentence(self, max_words: int = MaxWords) -> str:
		"""
		Walk the chain to produce a new sentence.

		The sentence opens with a randomly picked beginning, then grows one
		word at a time, keyed on the two most recent words, until it reaches
		a pair with no recorded continuation or grows to max_words words.
		The opening is never shortened to fit max_words. A warning is logged
		only when a continuation existed but was dropped because of the cap.

		Args:
			max_words (int): The word count at which generation stops
				(default is MaxWords)

		Raises:
			EmptyPoolError: If the chain has not learned any sentences.
			MaxWordsError: If max_words is less than 1.

		Returns:
			str: The generated sentence, ending in ".", "!", or "?".

		"""
		if max_words < 1:
			raise MaxWordsError(max_words)
		if not self.beginnings:
			raise EmptyPoolError(pool="set of beginnings")
		sentence = sample(self.beginnings).copy()
		terminal = sample(Terminals)

		while (word := self.next_word_for(sentence)) is not None:
			if len(sentence) >= max_words:
				logger.warning(
					"Sentence hit the %i word limit; cutting it off.",
					max_words,
				)
				break
			sentence.append(word)

		return " ".join(sentence) + terminal

	def sample_frequencies(self) -> str:
		"""
		Render a random context key and its continuations.

		Raises:
			EmptyPoolError: If the chain has no contexts.

		Returns:
			str: A "key: [word, word, ...]" report.

		"""
		if not self.freq:
			raise EmptyPoolError(pool="transition table")
		key = sample(list(self.freq))
		return f"{key}: [{', '.join(self.freq[key])}]"

	def get_longest_chain(self) -> dict[str, list[str]]:
		"""
		Find the context key with the most recorded continuations.

		Ties go to whichever key was seen first during training.

		Raises:
			EmptyPoolError: If the chain has no contexts.

		Returns:
			dict[str, list[str]]: The key mapped to its continuations.

		"""
		if not self.freq:
			raise EmptyPoolError(pool="transition table")
		key = max(self.freq, key=lambda k: len(self.freq[k]))
		return {key: self.freq[key]}

	def get_frequencies(self) -> dict[str, list[str]]:
		"""Return the live transition table."""
		return self.freq

	def get_beginnings(self) -> list[list[str]]:
		"""Return the live list of sentence openings."""
		return self.beginnings


if __name__ == "__main__":  # pragma: no cover
	logging.basicConfig(
		format="%(asctime)s: %(levelname)s: %(message)s",
		datefmt="%m/%d %H:%M:%S",
		level=logging.INFO,
		handlers=[logging.StreamHandler(sys.stderr)],
	)
	chain = MarkovChain(DefaultOrder)
	chain.add_text(asyncio.run(corpus.read_corpus()))
	print(chain.generate_sentence())  # noqa: T201
