"""Entry point for running the Telegram bot."""

import asyncio
import logging

from bot_impo.settings import get_settings

level_name = get_settings().LOG_LEVEL.upper()
level = getattr(logging, level_name, logging.INFO)
logging.basicConfig(level=level, format="[%(levelname)s] %(name)s: %(message)s")

from bot_impo.bot import main as run_bot


def run() -> None:
    asyncio.run(run_bot())


if __name__ == "__main__":
    run()
