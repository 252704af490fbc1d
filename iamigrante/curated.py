"""
Curated answers for the B2 → TPS → EB1 derivative adjustment scenario.

Spanish questions get these answers directly. Both languages use them as the
fallback when generation fails or misbehaves.
"""

from .text import Language, normalize

# All three must appear in the normalized question
CASE_MARKERS = ("b2", "tps", "eb1")

# Phrases that indicate a long period out of status (> 180 days)
_LONG_PERIOD_PHRASES = (
    "3 año", "tres año", "mas de 180", "más de 180",
    "años sin estatus", "años sin status",
    "largo periodo", "largo tiempo", "mucho tiempo",
    "3 year", "three year", "more than 180",
    "years without status", "years out of status", "long period",
)
LONG_PERIOD_MARKERS = tuple(dict.fromkeys(normalize(p) for p in _LONG_PERIOD_PHRASES))


# ── Questions (knowledge-base keys) ─────────────────────────────────────────

QUESTION_DEFAULT_ES = (
    "¿Una persona que entró legalmente a EEUU con visa de turista y luego obtuvo TPS "
    "puede ajustar status basado en ser beneficiario derivado de EB1?"
)
QUESTION_LONG_ES = (
    "¿Una persona que entró legalmente a EEUU con visa de turista, estuvo años sin estatus "
    "y luego obtuvo TPS puede ajustar status como beneficiario derivado de EB1?"
)
QUESTION_DEFAULT_EN = (
    "Can someone who entered with a B2 visa and later got TPS adjust status as an EB1 "
    "derivative beneficiary?"
)
QUESTION_LONG_EN = (
    "Can someone who entered with a B2 visa, was out of status for years, and later got "
    "TPS adjust status as an EB1 derivative beneficiary?"
)


# ── Answers ─────────────────────────────────────────────────────────────────

ANSWER_DEFAULT_ES = (
    "Para ajustar estatus como beneficiario derivado de EB1 después de una entrada legal con "
    "visa B2 y posterior TPS, se deben considerar varios factores:\n\n"
    "1. La entrada legal con visa B2 es favorable, ya que la persona fue inspeccionada y "
    "admitida legalmente.\n\n"
    "2. El período sin estatus entre el vencimiento de la visa B2 y la obtención del TPS puede "
    "ser perdonado bajo la sección 245(k) si fue menor a 180 días para casos de empleo como "
    "EB1.\n\n"
    "3. El TPS proporciona un estatus legal temporal y autorización de trabajo, pero no "
    "resuelve automáticamente períodos previos sin estatus.\n\n"
    "4. Para beneficiarios derivados de EB1 (cónyuges e hijos solteros menores de 21 años del "
    "beneficiario principal), aplican los mismos requisitos de admisibilidad.\n\n"
    "En resumen, es posible que esta persona pueda ajustar su estatus si el período sin "
    "estatus fue menor a 180 días o si califica para otras excepciones. Se recomienda "
    "consultar con un abogado especializado en inmigración para analizar todos los detalles "
    "específicos del caso."
)

ANSWER_LONG_ES = (
    "Para una persona que estuvo sin estatus por más de 180 días antes de obtener TPS, el "
    "ajuste a EB1 como beneficiario derivado enfrenta obstáculos significativos:\n\n"
    "1. La entrada legal con visa B2 es favorable, ya que la persona fue inspeccionada y "
    "admitida legalmente.\n\n"
    "2. Sin embargo, la sección 245(k) solo perdona hasta 180 días sin estatus para casos de "
    "empleo como EB1, EB2 y EB3. Con un período más largo sin estatus (años), generalmente no "
    "se puede ajustar dentro de EE.UU. a través de categorías basadas en empleo.\n\n"
    "3. El TPS proporciona estatus legal temporal y autorización de trabajo, pero no elimina "
    "las barreras creadas por los largos períodos sin estatus antes de obtenerlo.\n\n"
    "4. Opciones alternativas podrían incluir:\n"
    "   - Proceso consular con perdón I-601 por presencia ilegal (implica salir de EE.UU.)\n"
    "   - Verificar elegibilidad bajo sección 245(i) si existe una petición anterior al 30 de "
    "abril de 2001\n"
    "   - Buscar otras bases para el ajuste como matrimonio con ciudadano, asilo o visa U\n\n"
    "5. Para beneficiarios derivados de EB1 (cónyuges e hijos solteros menores de 21 años), "
    "aplican los mismos requisitos de admisibilidad que para el beneficiario principal.\n\n"
    "Esta situación compleja requiere consulta con un abogado de inmigración especializado "
    "para evaluar todas las opciones disponibles según las circunstancias específicas."
)

ANSWER_DEFAULT_EN = (
    "To adjust status as an EB1 derivative beneficiary after legal entry with a B2 visa and "
    "subsequent TPS, several factors must be considered:\n\n"
    "1. Legal entry with a B2 visa is favorable, as the person was inspected and legally "
    "admitted.\n\n"
    "2. The out-of-status period between the B2 visa expiration and obtaining TPS can be "
    "forgiven under section 245(k) if it was less than 180 days for employment-based cases "
    "like EB1.\n\n"
    "3. TPS provides temporary legal status and work authorization, but does not "
    "automatically resolve previous periods without status.\n\n"
    "4. For EB1 derivative beneficiaries (spouses and unmarried children under 21 of the "
    "principal beneficiary), the same admissibility requirements apply.\n\n"
    "In summary, this person may be able to adjust their status if the period without status "
    "was less than 180 days or if they qualify for other exceptions. It is recommended to "
    "consult with an immigration attorney to analyze all the specific details of the case."
)

ANSWER_LONG_EN = (
    "For someone who was out of status for more than 180 days before obtaining TPS, "
    "adjustment to EB1 as a derivative beneficiary faces significant obstacles:\n\n"
    "1. Legal entry with a B2 visa is favorable, as the person was inspected and legally "
    "admitted.\n\n"
    "2. However, section 245(k) only forgives up to 180 days out of status for "
    "employment-based cases like EB1, EB2, and EB3. With a longer period out of status "
    "(years), one generally cannot adjust within the U.S. through employment-based "
    "categories.\n\n"
    "3. TPS provides temporary legal status and work authorization but does not eliminate the "
    "barriers created by long periods out of status before obtaining it.\n\n"
    "4. Alternative options might include:\n"
    "   - Consular processing with I-601 waiver for unlawful presence (requires leaving the "
    "U.S.)\n"
    "   - Checking eligibility under section 245(i) if a petition exists from before April 30, "
    "2001\n"
    "   - Seeking other bases for adjustment such as marriage to a citizen, asylum, or U visa\n\n"
    "5. For EB1 derivative beneficiaries (spouses and unmarried children under 21), the same "
    "admissibility requirements apply as for the principal beneficiary.\n\n"
    "This complex situation requires consultation with a specialized immigration attorney to "
    "evaluate all available options based on the specific circumstances."
)

_ANSWERS = {
    (Language.ES, False): ANSWER_DEFAULT_ES,
    (Language.ES, True): ANSWER_LONG_ES,
    (Language.EN, False): ANSWER_DEFAULT_EN,
    (Language.EN, True): ANSWER_LONG_EN,
}

# (question, answer, language) seeds for the knowledge base
KNOWLEDGE_ENTRIES = (
    (QUESTION_DEFAULT_ES, ANSWER_DEFAULT_ES, Language.ES),
    (QUESTION_LONG_ES, ANSWER_LONG_ES, Language.ES),
    (QUESTION_DEFAULT_EN, ANSWER_DEFAULT_EN, Language.EN),
    (QUESTION_LONG_EN, ANSWER_LONG_EN, Language.EN),
)


def is_special_case(normalized_question: str) -> bool:
    """True when all three scenario markers appear in an already-normalized question."""
    return all(marker in normalized_question for marker in CASE_MARKERS)


def has_long_period_without_status(normalized_question: str) -> bool:
    """True when the question mentions years (or > 180 days) without status."""
    return any(marker in normalized_question for marker in LONG_PERIOD_MARKERS)


def curated_answer(language: Language, long_period: bool) -> str:
    return _ANSWERS[(Language(language), bool(long_period))]

