"""Babble Bot events, commands, listeners, and main."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Final

import dotenv
import nextcord
from nextcord.ext import commands

import corpus
import markov
import misc

__version__: Final[str] = "1.0.0"

logger = logging.getLogger(__name__)

BabbleBot = commands.Bot(
	command_prefix="!",
	case_insensitive=True,
	intents=nextcord.Intents.all(),
	chunk_guilds_at_startup=False,
	activity=nextcord.CustomActivity(name="Try !sentence and !learn"),
)


# Setup:


@BabbleBot.event
async def on_ready() -> None:
	logger.info(
		"Babble Bot %s online in %i servers!",
		__version__,
		len(BabbleBot.guilds),
	)


@BabbleBot.event
async def on_command_error(
	ctx: misc.BotContext, e: commands.errors.CommandError,
) -> int:
	"""
	Nextcord command error handler.

	Handle any instances of CommandError that are thrown without taking down
	the whole bot. If someone tries to use a command that does not exist,
	that may be because they are using another bot; don't do anything in
	that case. Every other CommandError gets logged.

	Args:
		ctx (misc.BotContext): The context in which the command threw an
			Exception
		e (commands.errors.CommandError): The Exception that was thrown

	Returns:
		int: 0 if the Exception was CommandNotFound; otherwise, 1.

	"""
	if isinstance(e, commands.CommandNotFound):
		return 0
	misc.log_exception(e, ctx)
	return 1


# Commands:


class ChainCog(commands.Cog):
	"""
	Commands backed by a single MarkovChain.

	The cog trains its chain on the corpus file the first time the bot
	connects; reconnects do not retrain.

	Attributes:
		chain (markov.MarkovChain): The chain used to generate sentences
		corpusPath (Path): The corpus file to train on
		trained (bool): Whether the corpus has been read into the chain

	"""

	def __init__(
		self,
		chain: markov.MarkovChain,
		corpus_path: Path | str = corpus.DefaultCorpus,
	) -> None:
		"""
		Attach a chain to the cog.

		Args:
			chain (markov.MarkovChain): The chain to train and sample
			corpus_path (Path | str): The corpus file to train on
				(default is corpus.DefaultCorpus)

		"""
		self.chain = chain
		self.corpusPath = Path(corpus_path)
		self.trained = False

	@commands.Cog.listener()
	async def on_ready(self) -> None:
		"""Train the chain on the corpus file the first time it can be read."""
		if self.trained:
			return
		try:
			text = await corpus.read_corpus(self.corpusPath)
		except FileNotFoundError:
			logger.exception(
				"Corpus file not found! Check the CORPUS path in .env.",
			)
			return
		self.trained = True
		logger.info(
			"Trained on %i sentences from %s.",
			self.chain.add_text(text),
			self.corpusPath,
		)

	@commands.command(  # type: ignore[arg-type]
		name="sentence", aliases=("babble", "markov"),
	)
	async def cmd_sentence(self, ctx: misc.BotContext) -> int:
		"""
		Reply with a freshly generated sentence.

		Returns:
			int: -1 for a thread event, 0 if the chain is untrained,
				otherwise 1.

		"""
		if misc.ctx_created_thread(ctx):
			return -1
		trained = bool(self.chain.get_beginnings())
		await ctx.send(embed=misc.sentence_embed(self.chain))
		return 1 if trained else 0

	@commands.command(  # type: ignore[arg-type]
		name="chain", aliases=("stats",),
	)
	async def cmd_chain(self, ctx: misc.BotContext) -> int:
		"""Reply with a summary of what the chain has learned."""
		if misc.ctx_created_thread(ctx):
			return -1
		await ctx.send(embed=misc.chain_embed(self.chain))
		return 1

	@commands.command(name="learn")  # type: ignore[arg-type]
	async def cmd_learn(
		self, ctx: misc.BotContext, *, text: str = "",
	) -> int:
		"""Train the chain on the rest of the message."""
		if misc.ctx_created_thread(ctx):
			return -1
		learned = self.chain.add_text(text)
		await ctx.send(embed=misc.bb_embed(
			"Babble Bot",
			misc.learned_report(
				ctx.author.mention, learned, self.chain.order,
			),
		))
		return learned


# Main:


def parse_order(raw: str | None) -> int:
	"""
	Read the chain order from its .env value.

	Args:
		raw (str | None): The ORDER value, if one was set

	Raises:
		ValueError: If raw is set but is not an integer.

	Returns:
		int: The order to build the chain with. Falls back to
			markov.DefaultOrder when ORDER is missing or blank.

	"""
	if raw is None or not raw.strip():
		return markov.DefaultOrder
	return int(raw)


def launch() -> None:
	"""
	Launch Babble Bot.

	Pulls in the Discord token, chain order, and corpus path from .env.
	Babble Bot falls back to the default order and corpus, but not having a
	Discord token or having an invalid order is fatal.

	Note that commands.Bot.run() is blocking; you can't include any method
	calls after that if you actually want them to fire.
	"""
	env = dotenv.dotenv_values(".env")
	if not (token := env.get("DISCORDTOKEN")):
		logger.error(
			"Fatal error! DISCORDTOKEN environment variable has not"
			" been defined. See: README.MD's installation section.",
		)
		return

	try:
		chain = markov.MarkovChain(parse_order(env.get("ORDER")))
	except ValueError:
		logger.exception("Fatal error! ORDER must be a positive integer.")
		return

	BabbleBot.add_cog(
		ChainCog(chain, env.get("CORPUS") or corpus.DefaultCorpus),
	)
	try:
		BabbleBot.run(token)
	except nextcord.DiscordException:
		logger.exception("Encountered DiscordException!")


if __name__ == "__main__":  # pragma: no cover
	# Pipe logs to stdout and logs folder
	logging.basicConfig(
		format="%(asctime)s: %(levelname)s: %(message)s",
		datefmt="%m/%d %H:%M:%S",
		level=logging.INFO,
		force=True,
		handlers=[
			logging.FileHandler(datetime.now(misc.TimeZone).strftime(
				"resources/logs/%Y-%m-%d-%H-%M-%S.log",
			)), logging.StreamHandler(sys.stdout),
		],
	)

	launch()
