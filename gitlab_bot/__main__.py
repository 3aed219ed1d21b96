"""Command line entry point: ``gitlab-bot`` / ``python -m gitlab_bot``."""

import argparse
import asyncio
import sys

from gitlab_bot.bot import Bot
from gitlab_bot.config import BotConfig, parse_log_level
from gitlab_bot.exceptions import ConfigurationError
from gitlab_bot.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitlab-bot",
        description="Keep a status report comment in sync on every open GitLab merge request.",
    )
    parser.add_argument("--once", action="store_true", help="Run a single cycle and exit.")
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between cycles (overrides GITLAB_BOT_INTERVAL).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level name (overrides GITLAB_BOT_LOG_LEVEL).",
    )
    return parser


async def _run(bot: Bot, once: bool) -> int:
    try:
        if once:
            summary = await bot.run_once()
            return 0 if summary is not None else 1
        await bot.run_forever()
        return 0
    finally:
        await bot.close()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = BotConfig.from_env()
        if args.interval is not None:
            if args.interval <= 0:
                raise ConfigurationError("--interval must be positive")
            config.interval = args.interval
        if args.log_level is not None:
            config.log_level = parse_log_level(args.log_level)
    except ConfigurationError as e:
        print(f"gitlab-bot: {e.message}", file=sys.stderr)
        return 2

    configure_logging(level=config.log_level)
    bot = Bot.from_config(config)
    try:
        return asyncio.run(_run(bot, args.once))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
