from aiogram.types import KeyboardButton, ReplyKeyboardMarkup

from bot_impo.constants import BTN_BACK, BTN_CALC, BTN_EXIT, BTN_FAQ, BTN_MAIN_MENU

# Shown under every step of the calculation form.
NAV_ROW = [BTN_BACK, BTN_MAIN_MENU]


def _keyboard(rows: list[list[str]], placeholder: str | None = None) -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[[KeyboardButton(text=label) for label in row] for row in rows],
        resize_keyboard=True,
        input_field_placeholder=placeholder,
    )


def main_menu() -> ReplyKeyboardMarkup:
    return _keyboard([[BTN_CALC], [BTN_FAQ, BTN_EXIT]])


def back_menu(placeholder: str | None = None) -> ReplyKeyboardMarkup:
    return _keyboard([NAV_ROW], placeholder)


def build_menu(
    options: list[str],
    columns: int = 2,
    placeholder: str | None = None,
) -> ReplyKeyboardMarkup:
    """Options laid out ``columns`` per row, followed by the navigation row.

    Long lists such as the country keyboard need several columns so that no
    button ends up hidden below the fold.
    """
    step = max(1, int(columns))
    rows = [options[i : i + step] for i in range(0, len(options), step)]
    rows.append(NAV_ROW)
    return _keyboard(rows, placeholder)


__all__ = ["main_menu", "back_menu", "build_menu"]
