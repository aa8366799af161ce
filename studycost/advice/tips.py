"""
Money-saving tips for an estimate.

Tips come from an optional text-generation service. The service is
best-effort: when it is not configured, fails, or returns nothing usable,
the fixed STATIC_TIPS are returned instead.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx

from studycost.config import Settings, cfg, get_logger
from studycost.sim.cost_estimator import EstimateInput

logger = get_logger(__name__)

MAX_TIPS = 5

STATIC_TIPS = [
    "Consider shared housing (reduce rent by 25–40%).",
    "Apply early for university or local scholarships.",
    "Cook at home to save 30–50% on food costs.",
    "Look for part-time campus jobs if eligible.",
    "Compare travel/health insurance for student discounts.",
]

SYSTEM_PROMPT = "You are a cost estimation assistant."


class TipsServiceError(Exception):
    """Raised when the tips service cannot produce a response."""


class TipsGenerator(ABC):
    """Produces money-saving tips for an estimate. May raise."""

    @abstractmethod
    def generate(self, inputs: EstimateInput) -> List[str]:
        pass


def _fmt(value: float) -> str:
    """Render an amount without a trailing '.0' for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def build_prompt(inputs: EstimateInput, currency: str = "USD") -> str:
    """User prompt describing the program costs."""
    return (
        "You are a cost advisor for international students.\n"
        f"Tuition: {_fmt(inputs.tuition)} {currency}\n"
        f"Monthly costs: rent {_fmt(inputs.monthly_rent)}, "
        f"food {_fmt(inputs.monthly_food)}, transport {_fmt(inputs.monthly_transport)}\n"
        f"Scholarship: {_fmt(inputs.scholarship)} {currency}\n"
        f"Duration: {inputs.months} months\n"
        f"Return exactly {MAX_TIPS} short actionable money-saving tips as a JSON array of strings.\n"
    )


def _strip_code_fence(text: str) -> str:
    stripped = text.strip()
    if stripped.startswith("```"):
        lines = stripped.splitlines()[1:]
        if lines and lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        stripped = "\n".join(lines).strip()
    return stripped


def parse_tips(text: Optional[str]) -> List[str]:
    """
    Extract tips from generated text.

    A JSON array is taken as-is. Other valid JSON yields no tips. Anything
    else is split into non-empty lines and the first MAX_TIPS are kept.
    """
    if not text:
        return []

    body = _strip_code_fence(text)
    try:
        parsed = json.loads(body)
    except ValueError:
        lines = [line.strip() for line in body.splitlines()]
        return [line for line in lines if line][:MAX_TIPS]

    if isinstance(parsed, list):
        return [str(item) for item in parsed]
    return []


class OpenAITipsGenerator(TipsGenerator):
    """Tips from the OpenAI chat completions API."""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[httpx.Client] = None):
        settings = settings or cfg
        if not settings.OPENAI_API_KEY:
            raise ValueError("OPENAI_API_KEY is required for OpenAITipsGenerator")

        self.settings = settings
        self.api_base = settings.OPENAI_API_BASE.rstrip("/")
        self.model = settings.TIPS_MODEL
        self.headers = {
            "Authorization": f"Bearer {settings.OPENAI_API_KEY}",
            "Content-Type": "application/json",
        }
        self.timeout = settings.TIPS_TIMEOUT_SECONDS
        # Injected clients are owned by the caller; otherwise one is opened per request
        self.client = client

        logger.debug(f"Initialized OpenAI tips generator with model: {self.model}")

    def _payload(self, inputs: EstimateInput) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(inputs, self.settings.CURRENCY)},
            ],
            "temperature": self.settings.TIPS_TEMPERATURE,
        }

    def _post(self, client: httpx.Client, inputs: EstimateInput) -> httpx.Response:
        return client.post(
            f"{self.api_base}/chat/completions",
            headers=self.headers,
            json=self._payload(inputs),
        )

    def generate(self, inputs: EstimateInput) -> List[str]:
        try:
            if self.client is not None:
                response = self._post(self.client, inputs)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = self._post(client, inputs)
        except httpx.TimeoutException as e:
            raise TipsServiceError("OpenAI API request timed out") from e
        except httpx.RequestError as e:
            raise TipsServiceError(f"OpenAI API request failed: {e}") from e

        if response.status_code != 200:
            raise TipsServiceError(f"OpenAI API error {response.status_code}: {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise TipsServiceError("OpenAI API returned invalid JSON") from e

        choices = data.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content")
        return parse_tips(content)


def build_tips_generator(settings: Optional[Settings] = None) -> Optional[TipsGenerator]:
    """OpenAI generator when an API key is configured, otherwise None."""
    settings = settings or cfg
    if not settings.tips_enabled:
        logger.info("OPENAI_API_KEY not set; using static tips")
        return None
    return OpenAITipsGenerator(settings)


def get_recommendations(inputs: EstimateInput, generator: Optional[TipsGenerator] = None) -> List[str]:
    """Tips for ``inputs``; never raises, falls back to STATIC_TIPS."""
    if generator is None:
        return list(STATIC_TIPS)

    try:
        tips = generator.generate(inputs)
    except Exception as e:
        logger.warning(f"Tips request failed: {e}")
        return list(STATIC_TIPS)

    if not tips:
        logger.warning("Tips service returned no usable tips; using static tips")
        return list(STATIC_TIPS)
    return tips
