"""
Adapter: LLM commentary for price alerts.

Implements CommentaryGenerator port using the OpenRouter
chat-completions API, with template-based fallback when no API key is
configured or the provider call fails. Alerts never fail because of
commentary.
"""

import logging
from decimal import Decimal
from typing import Optional

import httpx

from app.domain.portfolio.alert_rules import template_commentary
from app.domain.portfolio.entities import NotificationType
from app.domain.portfolio.ports import CommentaryGenerator

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "You are a crypto market analyst. Provide a brief (2-3 sentences max) "
    "analysis for this alert:\n"
    "{symbol} price has {direction} by {change:.2f}% in the last 24 hours.\n"
    "Current price: ${price:.2f}\n\n"
    "Be concise, professional, and mention potential market factors. "
    "Do not give financial advice."
)


class OpenRouterCommentaryGenerator(CommentaryGenerator):
    """Generate short alert analyses through OpenRouter.

    Args:
        api_key: OpenRouter key. Without one every call returns the
            template message and no request is made.
        api_url: Chat-completions endpoint.
        model: Model identifier.
        max_tokens: Completion token budget.
        timeout: Request timeout in seconds.
        client: Optional preconfigured httpx client (used in tests).
    """

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str,
        model: str,
        max_tokens: int = 150,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._model = model
        self._max_tokens = max_tokens
        self._client = client or httpx.Client(timeout=timeout)

        if not api_key:
            logger.info("OPENROUTER_API_KEY not set, alert commentary uses templates.")

    def close(self) -> None:
        self._client.close()

    def generate(
        self,
        symbol: str,
        percent_change: Decimal,
        current_price: Decimal,
        direction: NotificationType,
    ) -> str:
        """Return LLM commentary, or a templated message on any failure."""
        if not self._api_key:
            return template_commentary(symbol, percent_change, current_price, direction)

        try:
            return self._complete(symbol, percent_change, current_price, direction)
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as exc:
            logger.error("AI analysis failed for %s: %s", symbol, exc)
            return template_commentary(
                symbol, percent_change, current_price, direction, provider_failed=True
            )

    def _complete(
        self,
        symbol: str,
        percent_change: Decimal,
        current_price: Decimal,
        direction: NotificationType,
    ) -> str:
        verb = "increased" if direction is NotificationType.PRICE_UP else "decreased"
        prompt = PROMPT_TEMPLATE.format(
            symbol=symbol,
            direction=verb,
            change=abs(percent_change),
            price=current_price,
        )

        response = self._client.post(
            self._api_url,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            json={
                "model": self._model,
                "messages": [{"role": "user", "content": prompt}],
                "max_tokens": self._max_tokens,
            },
        )
        response.raise_for_status()

        content = response.json()["choices"][0]["message"]["content"]
        if not isinstance(content, str):
            raise ValueError(f"unexpected completion content: {type(content).__name__}")
        if not content.strip():
            raise ValueError("empty completion")
        return content.strip()
