from __future__ import annotations

import re
from dataclasses import dataclass
from functools import wraps
from typing import List

from aiogram import types
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State

from bot_impo.constants import BTN_BACK, BTN_MAIN_MENU
from bot_impo.utils.reset import reset_to_menu

_STEP_PREFIX = re.compile(r"^\s*Paso\s+\d+/\d+:\s*")


@dataclass
class NavStep:
    state: State
    prompt: str
    kb: types.ReplyKeyboardMarkup


class NavigationManager:
    """Stack of answered steps; handles the back and main-menu buttons."""

    def __init__(self, total_steps: int) -> None:
        self.total_steps = total_steps
        self.stack: List[NavStep] = []

    def _render(self, step: NavStep) -> str:
        cur = min(len(self.stack), self.total_steps)
        prompt = _STEP_PREFIX.sub("", step.prompt).strip()
        return f"Paso {cur}/{self.total_steps}: {prompt}"

    async def push(self, message: types.Message, fsm: FSMContext, step: NavStep) -> None:
        self.stack.append(step)
        await fsm.set_state(step.state)
        await message.answer(self._render(step), reply_markup=step.kb)

    async def handle_nav(self, message: types.Message, fsm: FSMContext) -> bool:
        # Back on the first step leaves the form like the main-menu button.
        if message.text == BTN_MAIN_MENU or (message.text == BTN_BACK and len(self.stack) <= 1):
            self.stack.clear()
            await reset_to_menu(message, fsm)
            return True
        if message.text == BTN_BACK:
            self.stack.pop()
            prev = self.stack[-1]
            await fsm.set_state(prev.state)
            await message.answer(self._render(prev), reply_markup=prev.kb)
            return True
        return False


def with_nav(handler):
    """Intercept navigation buttons before the step handler runs."""

    @wraps(handler)
    async def wrapped(message: types.Message, state: FSMContext, **kwargs):
        data = await state.get_data()
        nav: NavigationManager | None = data.get("_nav")
        if nav and await nav.handle_nav(message, state):
            return
        return await handler(message, state, nav=nav)

    return wrapped


__all__ = ["NavStep", "NavigationManager", "with_nav"]
