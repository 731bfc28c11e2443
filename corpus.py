"""Babble Bot corpus reading and sentence splitting."""

import logging
import re
from pathlib import Path
from typing import Final

import aiofiles

logger = logging.getLogger(__name__)

DefaultCorpus: Final[Path] = Path("resources/corpus.txt")

SentenceSeparators = re.compile(r"[.!?;:]")


async def read_corpus(path: Path | str = DefaultCorpus) -> str:
	"""
	Read an entire training corpus into memory.

	Args:
		path (Path | str): The UTF-8 text file to read
			(default is DefaultCorpus)

	Returns:
		str: The full contents of the file.

	"""
	async with aiofiles.open(path, encoding="UTF-8") as f:
		text = await f.read()
	logger.info("Read %i characters of corpus from %s.", len(text), path)
	return text


def split_sentences(text: str) -> list[str]:
	"""
	Split raw text into candidate sentences.

	Line breaks are flattened into spaces, then the text is cut at every
	piece of sentence-terminal punctuation. Empty fragments are dropped;
	fragments made up only of whitespace are kept, since the chain skips
	them on its own.

	Args:
		text (str): The raw text to split

	Returns:
		list[str]: The non-empty sentence fragments, in order.

	"""
	return [
		fragment
		for fragment in SentenceSeparators.split(text.replace("\n", " "))
		if fragment
	]
