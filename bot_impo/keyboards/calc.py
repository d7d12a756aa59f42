from aiogram.types import ReplyKeyboardMarkup

from bot_impo.constants import BTN_NO, BTN_SKIP, BTN_YES
from bot_impo.keyboards.menus import build_menu
from bot_impo.rules import load_rule_tables


def country_keyboard() -> ReplyKeyboardMarkup:
    return build_menu(list(load_rule_tables().countries), columns=3, placeholder="País")


def amount_keyboard() -> ReplyKeyboardMarkup:
    return build_menu([], placeholder="USD")


def skip_keyboard() -> ReplyKeyboardMarkup:
    return build_menu([BTN_SKIP], placeholder="USD")


def yes_no_keyboard() -> ReplyKeyboardMarkup:
    return build_menu([BTN_YES, BTN_NO])


__all__ = ["country_keyboard", "amount_keyboard", "skip_keyboard", "yes_no_keyboard"]
