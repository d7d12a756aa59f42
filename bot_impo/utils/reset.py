from aiogram import types
from aiogram.fsm.context import FSMContext

from bot_impo.constants import BTN_MAIN_MENU
from bot_impo.keyboards.menus import main_menu


async def reset_to_menu(message: types.Message, state: FSMContext, text: str | None = None):
    """Drop the form data (and its navigation stack) and show the main menu.

    ``text`` replaces the default menu caption, e.g. with an error message.
    """
    await state.clear()
    await message.answer(text or f"{BTN_MAIN_MENU}:", reply_markup=main_menu())
