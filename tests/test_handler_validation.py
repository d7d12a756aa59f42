import sys
from pathlib import Path
import asyncio

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

calculate = pytest.importorskip("bot_impo.handlers.calculate")
from bot_impo.constants import BTN_NO, BTN_SKIP, BTN_YES, ERROR_AMOUNT, ERROR_COUNTRY, ERROR_YES_NO
from bot_impo.states import CalcStates


class FakeState:
    def __init__(self, data):
        self.data = data

    async def get_data(self):
        return self.data

    async def update_data(self, **kwargs):
        self.data.update(kwargs)


class FakeMessage:
    def __init__(self, text=""):
        self.text = text
        self.photo = None
        self.caption = None
        self.answers = []

    async def answer(self, text, **kwargs):
        self.answers.append(text)


class FakeNav:
    def __init__(self):
        self.pushed = []

    async def handle_nav(self, message, state):
        return False

    async def push(self, message, state, step):
        self.pushed.append(step)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1000", 1000.0),
        ("1 234,5", 1234.5),
        ("0", 0.0),
        (" 12.75 ", 12.75),
        ("-1", None),
        ("abc", None),
        ("", None),
        (None, None),
        ("nan", None),
        ("inf", None),
    ],
)
def test_parse_amount(text, expected):
    assert calculate.parse_amount(text) == expected


def test_get_description_text():
    nav = FakeNav()
    state = FakeState({"_nav": nav})
    asyncio.run(calculate.get_description(FakeMessage("  zapatillas  "), state))
    assert state.data["description"] == "zapatillas"
    assert nav.pushed[0].state == CalcStates.country


def test_get_description_empty():
    nav = FakeNav()
    state = FakeState({"_nav": nav})
    msg = FakeMessage("   ")
    asyncio.run(calculate.get_description(msg, state))
    assert "description" not in state.data
    assert nav.pushed == []
    assert msg.answers


def test_get_country_validation():
    nav = FakeNav()
    state = FakeState({"_nav": nav})
    msg = FakeMessage("Atlántida")
    asyncio.run(calculate.get_country(msg, state))
    assert msg.answers == [ERROR_COUNTRY]
    assert nav.pushed == []

    asyncio.run(calculate.get_country(FakeMessage("Perú"), state))
    assert state.data["country"] == "Perú"
    assert nav.pushed[0].state == CalcStates.fob


def test_get_fob_validation():
    nav = FakeNav()
    state = FakeState({"_nav": nav})
    msg = FakeMessage("-5")
    asyncio.run(calculate.get_fob(msg, state))
    assert msg.answers == [ERROR_AMOUNT]

    asyncio.run(calculate.get_fob(FakeMessage("1000"), state))
    assert state.data["fob"] == 1000.0
    assert nav.pushed[0].state == CalcStates.freight


def test_get_freight_shows_theoretical_insurance():
    nav = FakeNav()
    state = FakeState({"_nav": nav, "fob": 1000.0})
    asyncio.run(calculate.get_freight(FakeMessage("200"), state))
    assert state.data["freight"] == 200.0
    step = nav.pushed[0]
    assert step.state == CalcStates.insurance
    assert "24.00" in step.prompt


def test_get_freight_without_amounts_uses_plain_prompt():
    nav = FakeNav()
    state = FakeState({"_nav": nav, "fob": 0.0})
    asyncio.run(calculate.get_freight(FakeMessage("0"), state))
    assert nav.pushed[0].prompt == calculate.PROMPT_INSURANCE


def test_get_insurance_skip_and_zero():
    nav = FakeNav()
    state = FakeState({"_nav": nav})
    asyncio.run(calculate.get_insurance(FakeMessage(BTN_SKIP), state))
    assert state.data["insurance"] is None

    asyncio.run(calculate.get_insurance(FakeMessage("0"), state))
    assert state.data["insurance"] == 0.0
    assert all(step.state == CalcStates.used for step in nav.pushed)

    msg = FakeMessage("mucho")
    asyncio.run(calculate.get_insurance(msg, state))
    assert msg.answers == [ERROR_AMOUNT]


def test_get_used_runs_calculation(monkeypatch):
    ran = []

    async def fake_run(message, state):
        ran.append(state.data["is_used"])

    monkeypatch.setattr(calculate, "_run_calculation", fake_run)

    state = FakeState({"_nav": FakeNav()})
    msg = FakeMessage("quizás")
    asyncio.run(calculate.get_used(msg, state))
    assert msg.answers == [ERROR_YES_NO]
    assert ran == []

    asyncio.run(calculate.get_used(FakeMessage(BTN_YES), state))
    asyncio.run(calculate.get_used(FakeMessage(BTN_NO), state))
    assert ran == [True, False]
