"""Generative backend: Ollama client plus prompt building and reply validation"""

import json
import logging
from typing import NamedTuple, Optional

import requests
from requests.exceptions import RequestException

from . import config
from . import curated
from .text import Language, detect_language, normalize

logger = logging.getLogger(__name__)


class IAMigranteError(Exception):
    """Base error for the package"""


class BackendUnavailable(IAMigranteError):
    """The completion service could not be reached or answered with an error"""


# ── Apologies ────────────────────────────────────────────────────────────────

BACKEND_ERROR = {
    Language.ES: (
        "Lo siento, hubo un error al procesar tu pregunta con el modelo avanzado. "
        "Por favor, intenta nuevamente más tarde."
    ),
    Language.EN: (
        "I'm sorry, there was an error processing your question with the advanced model. "
        "Please try again later."
    ),
}

NO_VALID_RESPONSE = {
    Language.ES: (
        "No se pudo obtener una respuesta válida del modelo. "
        "Por favor, intenta reformular tu pregunta."
    ),
    Language.EN: (
        "Could not get a valid response from the model. "
        "Please try rephrasing your question."
    ),
}

WRONG_LANGUAGE = {
    Language.ES: (
        "Lo siento, no pude generar una respuesta en español. Por favor, consulte con un "
        "abogado de inmigración para obtener asesoramiento específico."
    ),
    Language.EN: (
        "Sorry, I couldn't generate a response in English. Please consult with an "
        "immigration attorney for specific advice."
    ),
}

# Lowercase; a special-case reply containing any of these is discarded
REFUSAL_PHRASES = ("i cannot", "i'm sorry", "no puedo", "lo siento", "no tengo", "manipulación")


class OllamaClient:
    """Thin wrapper over the Ollama /api/generate endpoint"""

    def __init__(
        self,
        url: str = None,
        model: str = None,
        temperature: float = None,
        timeout: float = None,
        session: requests.Session = None,
    ):
        self.url = url or config.OLLAMA_URL
        self.model = model or config.OLLAMA_MODEL
        self.temperature = config.LLM_TEMPERATURE if temperature is None else temperature
        self.timeout = config.LLM_TIMEOUT if timeout is None else timeout
        self.session = session or requests.Session()

    def generate(self, prompt: str, max_tokens: int = None) -> str:
        """
        Send one completion request and return the concatenated text.

        The service streams newline-delimited JSON fragments; the ``response``
        field of each parseable fragment is appended in order. Broken
        fragments are skipped.

        Raises:
            BackendUnavailable: on any transport or HTTP error
        """
        payload = {
            "model": self.model,
            "prompt": prompt,
            "temperature": self.temperature,
            "max_tokens": max_tokens or config.LLM_MAX_TOKENS,
        }
        logger.debug(f"Sending prompt to {self.url} ({len(prompt)} chars)")
        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except RequestException as e:
            logger.error(f"Completion request failed: {e}")
            raise BackendUnavailable(str(e)) from e

        return self.parse_stream(response.text)

    @staticmethod
    def parse_stream(body: str) -> str:
        parts = []
        for line in (body or "").splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                fragment = json.loads(line)
            except ValueError as e:
                logger.debug(f"Skipping unparseable fragment: {e}")
                continue
            if isinstance(fragment, dict) and isinstance(fragment.get("response"), str):
                parts.append(fragment["response"])
        return "".join(parts)


# ── Prompts ──────────────────────────────────────────────────────────────────

_SPECIAL_INSTRUCTIONS = {
    (Language.ES, True): (
        "Explica las dificultades y alternativas para una persona que entró legalmente con "
        "visa B2, estuvo SIN ESTATUS POR UN LARGO PERÍODO (AÑOS) y luego obtuvo TPS, que ahora "
        "quiere ajustar su estatus como beneficiario derivado de EB1.\n\n"
        "Para tu respuesta:\n"
        "1. Sé claro en que la sección 245(k) NO es aplicable porque SOLO perdona hasta 180 "
        "días sin estatus.\n"
        "2. Con un período tan largo sin estatus, el ajuste dentro de EE.UU. será difícil o "
        "imposible.\n"
        "3. Menciona alternativas como la sección 245(i), perdones por dificultad extrema, o "
        "procesamiento consular.\n"
        "4. Sé concreto sobre las dificultades pero presenta todas las opciones posibles.\n"
        "5. Enfatiza la importancia de consultar con un abogado para este caso complejo.\n\n"
    ),
    (Language.ES, False): (
        "Explica si una persona que entró legalmente con visa B2, quedó sin estatus y luego "
        "obtuvo TPS, puede ajustar su estatus como beneficiario derivado de EB1.\n\n"
        "Para tu respuesta:\n"
        "1. La entrada legal con visa B2 es favorable porque la persona fue inspeccionada y "
        "admitida legalmente.\n"
        "2. El período sin estatus entre el vencimiento de la B2 y la obtención del TPS puede "
        "ser perdonado bajo sección 245(k) si fue menor a 180 días.\n"
        "3. TPS proporciona estatus legal temporal y autorización de trabajo, pero no resuelve "
        "automáticamente períodos previos sin estatus.\n"
        "4. Para beneficiarios derivados de EB1 aplican los mismos requisitos de "
        "admisibilidad.\n"
        "5. Es posible ajustar estatus si el período sin estatus fue menor a 180 días o "
        "califica para excepciones.\n\n"
    ),
    (Language.EN, True): (
        "Explain the challenges and alternatives for someone who entered legally with a B2 "
        "visa, was OUT OF STATUS FOR A LONG PERIOD (YEARS) and then obtained TPS, who now wants "
        "to adjust status as an EB1 derivative beneficiary.\n\n"
        "For your answer:\n"
        "1. Be clear that section 245(k) is NOT applicable because it ONLY forgives up to 180 "
        "days out of status.\n"
        "2. With such a long period out of status, adjustment within the U.S. will be "
        "difficult or impossible.\n"
        "3. Mention alternatives like section 245(i), extreme hardship waivers, or consular "
        "processing.\n"
        "4. Be concrete about the challenges but present all possible options.\n"
        "5. Emphasize the importance of consulting with an attorney for this complex case.\n\n"
    ),
    (Language.EN, False): (
        "Explain whether someone who entered legally with a B2 visa, fell out of status and "
        "then obtained TPS, can adjust status as an EB1 derivative beneficiary.\n\n"
        "For your answer:\n"
        "1. Legal entry with a B2 visa is favorable because the person was inspected and "
        "legally admitted.\n"
        "2. The out-of-status period between the B2 expiration and obtaining TPS may be "
        "forgiven under section 245(k) if it was less than 180 days.\n"
        "3. TPS provides temporary legal status and work authorization, but does not "
        "automatically resolve earlier periods out of status.\n"
        "4. The same admissibility requirements apply to EB1 derivative beneficiaries.\n"
        "5. Adjustment is possible if the out-of-status period was under 180 days or an "
        "exception applies.\n\n"
    ),
}


def build_prompt(question: str, language: Language, special_case: bool = False,
                 long_period: bool = False) -> str:
    """Prompt for the first attempt: role, language directive, question, instructions."""
    language = Language(language)

    if special_case:
        instructions = _SPECIAL_INSTRUCTIONS[(language, bool(long_period))]
        if language == Language.ES:
            return (
                "Como abogado de inmigración de EE.UU., responde SOLO EN ESPAÑOL a esta "
                f"pregunta específica:\n\n{question}\n\n{instructions}Respuesta:"
            )
        return (
            "As a U.S. immigration attorney, answer ONLY IN ENGLISH to this specific "
            f"question:\n\n{question}\n\n{instructions}Response:"
        )

    if language == Language.ES:
        return (
            "IMPORTANTE: RESPONDE ÚNICAMENTE EN ESPAÑOL.\n\n"
            "Eres un abogado experto en inmigración de EE.UU. Responde a la siguiente "
            f"pregunta sobre inmigración:\n\nPregunta: {question}\n\n"
            "Instrucciones específicas:\n"
            "1. RESPONDE SOLO EN ESPAÑOL de forma clara y detallada.\n"
            "2. Analiza punto por punto los requisitos, las opciones y los riesgos del caso.\n"
            "3. Menciona las secciones de la ley y los formularios aplicables.\n"
            "4. Resume al final con una respuesta clara (sí/no/quizás) y los pasos a seguir.\n\n"
            "Respuesta en español:"
        )
    return (
        "IMPORTANT: RESPOND ONLY IN ENGLISH.\n\n"
        "You are an expert U.S. immigration attorney. Answer the following immigration "
        f"question:\n\nQuestion: {question}\n\n"
        "Specific instructions:\n"
        "1. RESPOND ONLY IN ENGLISH, clearly and in detail.\n"
        "2. Analyze the requirements, options and risks of the case point by point.\n"
        "3. Mention the applicable sections of law and forms.\n"
        "4. End with a clear answer (yes/no/maybe) and the next steps.\n\n"
        "Answer in English:"
    )


def build_retry_prompt(question: str, language: Language) -> str:
    """Terse prompt used once when the first reply came back in the wrong language."""
    if Language(language) == Language.ES:
        return (
            "RESPONDE EXCLUSIVAMENTE EN ESPAÑOL. ESTO ES CRÍTICO.\n\n"
            f"Pregunta sobre inmigración: {question}\n\n"
            "TU RESPUESTA (SOLO EN ESPAÑOL):"
        )
    return (
        "RESPOND EXCLUSIVELY IN ENGLISH. THIS IS CRITICAL.\n\n"
        f"Immigration question: {question}\n\n"
        "YOUR ANSWER (ONLY IN ENGLISH):"
    )


class Generation(NamedTuple):
    """Generated text; ``transient`` marks apologies that must not be remembered"""

    text: str
    transient: bool = False


def looks_like_refusal(text: str) -> bool:
    lowered = text.lower()
    return any(phrase in lowered for phrase in REFUSAL_PHRASES)


class GenerativeResponder:
    """
    Produces an answer through the completion service.

    Never raises: every path ends in generated text, a curated answer for
    the B2 → TPS → EB1 scenario, or an apology in the requested language.
    """

    def __init__(self, client: OllamaClient = None, min_length: int = None):
        self.client = client or OllamaClient()
        self.min_length = config.MIN_GENERATED_LENGTH if min_length is None else min_length

    def _call(self, prompt: str, max_tokens: int) -> Optional[str]:
        """Completion text, or None when the backend is unreachable."""
        try:
            return self.client.generate(prompt, max_tokens=max_tokens)
        except BackendUnavailable:
            return None
        except Exception as e:
            logger.error(f"Unexpected error from completion backend: {e}")
            return None

    def generate(self, question: str, language: Language) -> str:
        return self.generate_answer(question, language).text

    def generate_answer(self, question: str, language: Language) -> Generation:
        """Like generate, but also reports whether the text is only an apology."""
        language = Language(language)
        normalized = normalize(question)
        special_case = curated.is_special_case(normalized)
        long_period = special_case and curated.has_long_period_without_status(normalized)
        fallback = curated.curated_answer(language, long_period) if special_case else None

        prompt = build_prompt(question, language, special_case, long_period)
        reply = self._call(prompt, config.LLM_MAX_TOKENS)

        if special_case and (
            reply is None
            or len(reply.strip()) < self.min_length
            or looks_like_refusal(reply)
        ):
            logger.info("Generated reply unusable for the B2/TPS/EB1 case, using curated answer")
            return Generation(fallback)

        if reply is None:
            return Generation(BACKEND_ERROR[language], transient=True)

        reply = reply.strip()
        if not reply:
            logger.warning("Completion backend returned an empty reply")
            return Generation(NO_VALID_RESPONSE[language], transient=True)

        if detect_language(reply) == language:
            logger.info(f"Generated answer ({len(reply)} chars)")
            return Generation(reply)

        logger.warning(f"Reply not in {language.value}, retrying with a stricter prompt")
        retry = self._call(build_retry_prompt(question, language), config.LLM_RETRY_MAX_TOKENS)
        retry = (retry or "").strip()
        if retry and detect_language(retry) == language and not (
            special_case and (len(retry) < self.min_length or looks_like_refusal(retry))
        ):
            logger.info(f"Retry produced answer ({len(retry)} chars)")
            return Generation(retry)

        if fallback:
            logger.info("Retry failed, using curated answer")
            return Generation(fallback)
        return Generation(WRONG_LANGUAGE[language], transient=True)
