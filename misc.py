"""Babble Bot embed and formatting helpers."""

import logging
from datetime import UTC, datetime
from typing import Final

import nextcord
from nextcord.ext import commands

from markov import MarkovChain

logger = logging.getLogger(__name__)

MaxMsgLength: Final[int] = 1024
BbColor: Final[int] = 0xFFF994
ErrorColor: Final[int] = 0xFF0000
TimeZone = UTC

UntrainedMsg = (
	"I haven't learned any sentences yet! Give me something to"
	" read with !learn [text], or check that my corpus file exists."
)

NothingLearnedMsg = (
	"I couldn't learn anything from that, {}. Sentences need at"
	" least {} words for me to pick up on them."
)

LearnedMsg = "Thanks, {}! I learned {} new sentence{}."

BotContext = commands.Context[commands.Bot]


def bb_embed(
	name: str = "",
	value: str = "",
	col: int | nextcord.Color = BbColor,
	*,
	show_time: bool = False,
) -> nextcord.Embed:
	"""
	Build the embed that every Babble Bot reply is sent in.

	Sentences, chain stats, and learn reports all share this embed; only
	the text and the color change. Errors such as an untrained chain swap
	in ErrorColor.

	Args:
		name (str): The heading, usually "Babble Bot" (default is "")
		value (str): The sentence or report text (default is "")
		col (int | nextcord.Color): The sidebar color (default is BbColor)
		show_time (bool): Whether to stamp the embed with the current UTC
			time (default is False)

	Returns:
		nextcord.Embed: The reply embed.

	"""
	return nextcord.Embed(
		title=name,
		description=value,
		color=col,
		timestamp=datetime.now(TimeZone) if show_time else None,
	)


def log_exception(e: Exception, ctx: BotContext) -> None:
	"""
	Log a command that failed, along with who sent it and where.

	Called from the bot's on_command_error handler. The message content is
	truncated, since !learn can carry a whole page of training text.

	Args:
		e (Exception): The error the command raised
		ctx (BotContext): The context of the failed command

	"""
	logger.error(
		"%s Command: %s; Author: %s; Content: %s; Guild: %s; Type: %s",
		e,
		ctx.invoked_with,
		ctx.author,
		truncate(ctx.message.content),
		ctx.guild,
		type(e),
	)


def ctx_created_thread(ctx: BotContext) -> bool:
	"""
	Check whether a chain command was fired by a thread event.

	Discord posts a system message when a thread is created or a channel is
	renamed, and that message carries the new name. A thread called
	"!learn ..." would otherwise train the chain on its own title, so the
	cog commands bail out early on these.

	Args:
		ctx (BotContext): The context of the chain command

	Returns:
		bool: Whether the message is a thread creation or rename notice.

	"""
	return ctx.message.type in {
		nextcord.MessageType.thread_created,
		nextcord.MessageType.channel_name_change,
	}


def truncate(text: str, limit: int = MaxMsgLength) -> str:
	"""
	Shorten text so that it fits in an Embed field.

	Embed fields have a length limit of 1024 characters; generated sentences
	and continuation lists can easily run past that.

	Args:
		text (str): The text to shorten
		limit (int): The maximum allowed length (default is MaxMsgLength)

	Returns:
		str: The text, cut down to limit characters with a trailing "..."
			if it was too long.

	"""
	if len(text) <= limit:
		return text
	return text[:limit - 3] + "..."


def sentence_embed(chain: MarkovChain) -> nextcord.Embed:
	if not chain.get_beginnings():
		return bb_embed("Babble Bot", UntrainedMsg, ErrorColor)
	return bb_embed("Babble Bot says:", truncate(chain.generate_sentence()))


def chain_embed(chain: MarkovChain) -> nextcord.Embed:
	"""
	Summarize what a chain has learned.

	Args:
		chain (MarkovChain): The chain to describe

	Returns:
		nextcord.Embed: An embed listing the chain's order, size, longest
			chain, and a randomly picked context.

	"""
	if not chain.get_frequencies():
		return bb_embed("Babble Bot Chain Stats", UntrainedMsg, ErrorColor)
	((key, words),) = chain.get_longest_chain().items()
	return bb_embed("Babble Bot Chain Stats").add_field(
		name="Order", value=str(chain.order),
	).add_field(
		name="Beginnings", value=str(len(chain.get_beginnings())),
	).add_field(
		name="Contexts", value=str(len(chain)),
	).add_field(
		name="Longest Chain",
		value=truncate(f"{key}: {len(words)} continuations"),
		inline=False,
	).add_field(
		name="Random Context",
		value=truncate(chain.sample_frequencies()),
		inline=False,
	)


def learned_report(author: str, learned: int, order: int) -> str:
	if learned == 0:
		return NothingLearnedMsg.format(author, order + 1)
	return LearnedMsg.format(author, learned, "" if learned == 1 else "s")
