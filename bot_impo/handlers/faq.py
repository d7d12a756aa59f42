from aiogram import F, Router, types
from aiogram.fsm.context import FSMContext

from bot_impo.constants import BTN_CALC, BTN_FAQ
from bot_impo.keyboards.menus import back_menu
from bot_impo.tariff.engine import AGENT_MANDATORY_FOB_USD, GENERAL_DUTY_RATE, VAT_RATE
from bot_impo.tariff import format_percentage

router = Router()

FAQ_TEXT = (
    "ℹ️ <b>Preguntas frecuentes</b>\n"
    "- ¿Cómo calculo los impuestos? Usa «{calc}» en el menú principal.\n"
    "- Arancel general: {duty} sobre el valor CIF; 0% con TLC y certificado de origen.\n"
    "- Productos usados pagan un 50% adicional sobre el arancel.\n"
    "- IVA: {vat} sobre CIF + arancel + impuestos especiales.\n"
    "- Sobre US$ {threshold} FOB es obligatorio contratar un Agente de Aduanas.\n"
    "- El resultado es una estimación, no una liquidación aduanera formal."
).format(
    calc=BTN_CALC,
    duty=format_percentage(GENERAL_DUTY_RATE),
    vat=format_percentage(VAT_RATE),
    threshold=f"{AGENT_MANDATORY_FOB_USD:,}".replace(",", "."),
)


@router.message(F.text == BTN_FAQ)
async def show_faq(message: types.Message, state: FSMContext) -> None:
    await message.answer(FAQ_TEXT, reply_markup=back_menu())
