import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from bot_impo.handlers import calculate, faq, menu
from bot_impo.rules import load_rule_tables
from bot_impo.services.rates import close_rates_session
from bot_impo.settings import get_settings

logger = logging.getLogger(__name__)


async def on_shutdown(bot):
    await close_rates_session()


def build_dispatcher() -> Dispatcher:
    dp = Dispatcher()
    dp.shutdown.register(on_shutdown)

    dp.include_router(menu.router)
    dp.include_router(faq.router)
    dp.include_router(calculate.router)
    return dp


async def main():
    settings = get_settings()
    if not settings.BOT_TOKEN:
        raise RuntimeError("BOT_TOKEN is not configured")

    # Fail fast on malformed rule tables instead of on the first request
    load_rule_tables()

    bot = Bot(
        token=settings.BOT_TOKEN,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    dp = build_dispatcher()

    # Ensure polling works even if a webhook was previously configured
    try:
        await bot.delete_webhook(drop_pending_updates=True)
    except Exception as exc:
        logger.warning("Could not delete webhook: %s", exc)

    await dp.start_polling(bot)
