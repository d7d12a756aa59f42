"""Entry points outside the calculation form: /start, /cancel, menu and exit."""

from aiogram import F, Router, types
from aiogram.filters import Command, CommandStart, StateFilter
from aiogram.fsm.context import FSMContext

from bot_impo.constants import (
    BTN_BACK,
    BTN_EXIT,
    BTN_MAIN_MENU,
    CANCEL_TEXT,
    EXIT_TEXT,
    NOTHING_TO_CANCEL_TEXT,
    WELCOME_TEXT,
)
from bot_impo.keyboards.menus import main_menu
from bot_impo.utils.reset import reset_to_menu

router = Router()


@router.message(CommandStart(), StateFilter("*"))
async def cmd_start(message: types.Message, state: FSMContext):
    await state.clear()
    await message.answer(WELCOME_TEXT, reply_markup=main_menu())


@router.message(Command("cancel"), StateFilter("*"))
async def cmd_cancel(message: types.Message, state: FSMContext):
    if await state.get_state() is None:
        await message.answer(NOTHING_TO_CANCEL_TEXT, reply_markup=main_menu())
        return
    await reset_to_menu(message, state, CANCEL_TEXT)


# Inside the form these buttons are handled by the step navigation.
@router.message(F.text == BTN_MAIN_MENU)
@router.message(F.text == BTN_BACK, StateFilter(None))
async def go_main_menu(message: types.Message, state: FSMContext):
    await reset_to_menu(message, state)


@router.message(F.text == BTN_EXIT)
async def exit_bot(message: types.Message, state: FSMContext):
    await state.clear()
    await message.answer(EXIT_TEXT, reply_markup=types.ReplyKeyboardRemove())
