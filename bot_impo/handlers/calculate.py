from __future__ import annotations

import asyncio
import logging
import math
import os
import tempfile
import uuid

from aiogram import F, Router, types
from aiogram.fsm.context import FSMContext
from aiogram.types import FSInputFile

from bot_impo.constants import (
    BTN_CALC,
    BTN_NO,
    BTN_SKIP,
    BTN_YES,
    CALCULATING,
    DESCRIBING_IMAGE,
    ERROR_AMOUNT,
    ERROR_CALCULATION,
    ERROR_COUNTRY,
    ERROR_DESCRIPTION,
    ERROR_YES_NO,
    IMAGE_DESCRIBED,
    PROMPT_COUNTRY,
    PROMPT_DESCRIPTION,
    PROMPT_FOB,
    PROMPT_FREIGHT,
    PROMPT_INSURANCE,
    PROMPT_INSURANCE_THEORETICAL,
    PROMPT_USED,
    TOTAL_STEPS,
)
from bot_impo.errors import ClassifierError, ImpoError
from bot_impo.keyboards.calc import amount_keyboard, country_keyboard, skip_keyboard, yes_no_keyboard
from bot_impo.keyboards.menus import back_menu
from bot_impo.models import ShipmentInput
from bot_impo.rules import load_rule_tables
from bot_impo.services.catalog import recommend_catalog
from bot_impo.services.classifier import classify_product, describe_image
from bot_impo.services.pdf_report import generate_calculation_pdf
from bot_impo.services.rates import get_dolar_observado
from bot_impo.states import CalcStates
from bot_impo.tariff import calculate_taxes, theoretical_insurance
from bot_impo.utils.formatting import format_result_message
from bot_impo.utils.navigation import NavigationManager, NavStep, with_nav
from bot_impo.utils.reset import reset_to_menu

logger = logging.getLogger(__name__)

router = Router()


def parse_amount(text: str | None) -> float | None:
    """Parse a non-negative USD amount typed by the user; ``None`` if invalid."""
    raw = (text or "").strip().replace(" ", "").replace(",", ".")
    try:
        value = float(raw)
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value) or value < 0:
        return None
    return value


def _insurance_prompt(fob: float, freight: float) -> str:
    amount = theoretical_insurance(fob, freight)
    if amount is None:
        return PROMPT_INSURANCE
    return PROMPT_INSURANCE_THEORETICAL.format(amount=amount)


@router.message(F.text == BTN_CALC)
async def start_calc(message: types.Message, state: FSMContext):
    await state.clear()
    nav = NavigationManager(total_steps=TOTAL_STEPS)
    await state.update_data(_nav=nav)
    await nav.push(message, state, NavStep(CalcStates.description, PROMPT_DESCRIPTION, back_menu("Ej.: zapatillas deportivas")))


@router.message(CalcStates.description)
@with_nav
async def get_description(message: types.Message, state: FSMContext, nav: NavigationManager | None):
    if message.photo:
        buffer = await message.bot.download(message.photo[-1])
        image = buffer.read()
        await state.update_data(image=image, image_mime="image/jpeg")
        description = (message.caption or "").strip()
        if not description:
            await message.answer(DESCRIBING_IMAGE)
            try:
                description = await asyncio.to_thread(describe_image, image)
            except ClassifierError as exc:
                logger.warning("Image description failed: %s", exc)
                await message.answer(f"{exc.user_message}\n{ERROR_DESCRIPTION}")
                return
            await message.answer(IMAGE_DESCRIBED.format(description=description))
    else:
        description = (message.text or "").strip()
    if not description:
        await message.answer(ERROR_DESCRIPTION)
        return
    await state.update_data(description=description)
    await nav.push(message, state, NavStep(CalcStates.country, PROMPT_COUNTRY, country_keyboard()))


@router.message(CalcStates.country)
@with_nav
async def get_country(message: types.Message, state: FSMContext, nav: NavigationManager | None):
    country = (message.text or "").strip()
    if country not in load_rule_tables().countries:
        await message.answer(ERROR_COUNTRY, reply_markup=country_keyboard())
        return
    await state.update_data(country=country)
    await nav.push(message, state, NavStep(CalcStates.fob, PROMPT_FOB, amount_keyboard()))


@router.message(CalcStates.fob)
@with_nav
async def get_fob(message: types.Message, state: FSMContext, nav: NavigationManager | None):
    fob = parse_amount(message.text)
    if fob is None:
        await message.answer(ERROR_AMOUNT, reply_markup=amount_keyboard())
        return
    await state.update_data(fob=fob)
    await nav.push(message, state, NavStep(CalcStates.freight, PROMPT_FREIGHT, amount_keyboard()))


@router.message(CalcStates.freight)
@with_nav
async def get_freight(message: types.Message, state: FSMContext, nav: NavigationManager | None):
    freight = parse_amount(message.text)
    if freight is None:
        await message.answer(ERROR_AMOUNT, reply_markup=amount_keyboard())
        return
    await state.update_data(freight=freight)
    data = await state.get_data()
    prompt = _insurance_prompt(data["fob"], freight)
    await nav.push(message, state, NavStep(CalcStates.insurance, prompt, skip_keyboard()))


@router.message(CalcStates.insurance)
@with_nav
async def get_insurance(message: types.Message, state: FSMContext, nav: NavigationManager | None):
    if (message.text or "").strip() == BTN_SKIP:
        insurance = None
    else:
        insurance = parse_amount(message.text)
        if insurance is None:
            await message.answer(ERROR_AMOUNT, reply_markup=skip_keyboard())
            return
    await state.update_data(insurance=insurance)
    await nav.push(message, state, NavStep(CalcStates.used, PROMPT_USED, yes_no_keyboard()))


@router.message(CalcStates.used)
@with_nav
async def get_used(message: types.Message, state: FSMContext, nav: NavigationManager | None):
    answer = (message.text or "").strip().lower()
    if answer in {BTN_YES.lower(), "si"}:
        is_used = True
    elif answer == BTN_NO.lower():
        is_used = False
    else:
        await message.answer(ERROR_YES_NO, reply_markup=yes_no_keyboard())
        return
    await state.update_data(is_used=is_used)
    await _run_calculation(message, state)


async def _run_calculation(message: types.Message, state: FSMContext) -> None:
    data = await state.get_data()
    shipment = ShipmentInput(
        description=data["description"],
        country=data["country"],
        fob_value=data["fob"],
        freight=data["freight"],
        declared_insurance=data.get("insurance"),
        is_used=data.get("is_used", False),
    )
    await message.answer(CALCULATING)

    try:
        suggestions = await asyncio.to_thread(
            classify_product,
            shipment.description,
            data.get("image"),
            data.get("image_mime", "image/jpeg"),
        )
        exchange_rate = await get_dolar_observado()
    except ImpoError as exc:
        logger.warning("Calculation aborted: %s", exc)
        await reset_to_menu(message, state, ERROR_CALCULATION.format(error=exc.user_message))
        return

    result = calculate_taxes(shipment, exchange_rate, suggestions)
    catalog = recommend_catalog(shipment.description, suggestions)
    await message.answer(
        format_result_message(
            result=result,
            shipment=shipment,
            suggestions=suggestions,
            catalog=catalog,
        )
    )

    pdf_path = os.path.join(tempfile.gettempdir(), f"estimacion_{uuid.uuid4().hex}.pdf")
    generate_calculation_pdf(result, shipment, pdf_path, suggestions)
    try:
        await message.answer_document(FSInputFile(pdf_path))
    finally:
        if os.path.exists(pdf_path):
            os.remove(pdf_path)

    await reset_to_menu(message, state)
