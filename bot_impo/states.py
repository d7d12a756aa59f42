"""FSM state groups for bot conversations."""

from aiogram.fsm.state import State, StatesGroup


class CalcStates(StatesGroup):
    """Conversation steps for the import tax estimate."""

    description = State()
    country = State()
    fob = State()
    freight = State()
    insurance = State()
    used = State()


__all__ = ["CalcStates"]
