"""Shared constants: button labels, prompts and messages of the bot."""

# Button labels
BTN_CALC = "\U0001F4CA Calcular impuestos"
BTN_BACK = "⬅️ Atrás"
BTN_MAIN_MENU = "\U0001F3E0 Menú principal"
BTN_FAQ = "ℹ️ Preguntas frecuentes"
BTN_EXIT = "\U0001F6AA Salir"
BTN_SKIP = "Omitir"
BTN_YES = "Sí"
BTN_NO = "No"

__all_buttons__ = [
    "BTN_CALC",
    "BTN_BACK",
    "BTN_MAIN_MENU",
    "BTN_FAQ",
    "BTN_EXIT",
    "BTN_SKIP",
    "BTN_YES",
    "BTN_NO",
]

WELCOME_TEXT = (
    "\U0001F44B ¡Hola! Estimo los impuestos de importación a Chile a partir de la "
    "descripción o una foto del producto y los valores del envío."
)
EXIT_TEXT = "¡Hasta pronto! Escribe /start para volver."
CANCEL_TEXT = "Cálculo cancelado."
NOTHING_TO_CANCEL_TEXT = "No hay ningún cálculo en curso."

# Conversation steps
TOTAL_STEPS = 6

PROMPT_DESCRIPTION = "Describe el producto o envía una foto:"
ERROR_DESCRIPTION = "Escribe una descripción o envía una foto del producto."
DESCRIBING_IMAGE = "\U0001F50E Analizando la imagen..."
IMAGE_DESCRIBED = "Descripción generada: {description}"

PROMPT_COUNTRY = "País de origen:"
ERROR_COUNTRY = "Selecciona un país del teclado."

PROMPT_FOB = "Valor FOB del producto (USD):"
PROMPT_FREIGHT = "Costo del flete (USD):"
ERROR_AMOUNT = "Ingresa un número mayor o igual a 0."

PROMPT_INSURANCE = "Seguro declarado (USD) o pulsa «Omitir»:"
PROMPT_INSURANCE_THEORETICAL = (
    "Seguro declarado (USD) o pulsa «Omitir» para aplicar el seguro teórico "
    "de US$ {amount:,.2f} (2% de FOB+Flete):"
)

PROMPT_USED = "¿El producto es usado?"
ERROR_YES_NO = "Responde «Sí» o «No»."

CALCULATING = "⏳ Clasificando el producto y calculando impuestos..."
ERROR_CALCULATION = "⚠️ Error de cálculo: {error}"

# PDF report
PDF_CALC_TITLE = "Estimación de impuestos de importación"
PDF_PAGE_LABEL = "Página {page}"
PDF_FIELD_DESCRIPTION = "Producto"
PDF_FIELD_COUNTRY = "País de origen"
PDF_FIELD_CONDITION = "Condición"
PDF_FIELD_HS = "Código HS sugerido"
PDF_SECTION_SUMMARY = "Desglose (USD)"
PDF_SECTION_DOCUMENTS = "Documentos adicionales"
PDF_SECTION_AGENT = "Agente de Aduanas"
PDF_SECTION_ALERTS = "Alertas"

# Breakdown labels
LABEL_FOB = "Valor FOB"
LABEL_FREIGHT = "Flete"
LABEL_INSURANCE = "Seguro ({method})"
LABEL_CIF = "Valor CIF"
LABEL_DUTY = "Derecho ad valorem ({rate})"
LABEL_SPECIAL_TAX = "Impuestos especiales ({rate})"
LABEL_VAT = "IVA (19%)"
LABEL_TOTAL_TAXES = "Total impuestos"
LABEL_TOTAL_USD = "Costo total USD"
LABEL_EXCHANGE_RATE = "Tipo de cambio CLP"
LABEL_TOTAL_CLP = "Costo total CLP"

__all__ = [
    *__all_buttons__,
    "WELCOME_TEXT",
    "EXIT_TEXT",
    "CANCEL_TEXT",
    "NOTHING_TO_CANCEL_TEXT",
    "TOTAL_STEPS",
    "PROMPT_DESCRIPTION",
    "ERROR_DESCRIPTION",
    "DESCRIBING_IMAGE",
    "IMAGE_DESCRIBED",
    "PROMPT_COUNTRY",
    "ERROR_COUNTRY",
    "PROMPT_FOB",
    "PROMPT_FREIGHT",
    "ERROR_AMOUNT",
    "PROMPT_INSURANCE",
    "PROMPT_INSURANCE_THEORETICAL",
    "PROMPT_USED",
    "ERROR_YES_NO",
    "CALCULATING",
    "ERROR_CALCULATION",
    "PDF_CALC_TITLE",
    "PDF_PAGE_LABEL",
    "PDF_FIELD_DESCRIPTION",
    "PDF_FIELD_COUNTRY",
    "PDF_FIELD_CONDITION",
    "PDF_FIELD_HS",
    "PDF_SECTION_SUMMARY",
    "PDF_SECTION_DOCUMENTS",
    "PDF_SECTION_AGENT",
    "PDF_SECTION_ALERTS",
    "LABEL_FOB",
    "LABEL_FREIGHT",
    "LABEL_INSURANCE",
    "LABEL_CIF",
    "LABEL_DUTY",
    "LABEL_SPECIAL_TAX",
    "LABEL_VAT",
    "LABEL_TOTAL_TAXES",
    "LABEL_TOTAL_USD",
    "LABEL_EXCHANGE_RATE",
    "LABEL_TOTAL_CLP",
]
