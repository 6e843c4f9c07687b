"""Abstract base class for all content handlers."""

import json
import logging
import random
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

from models.requests import Payload, RequestKind
from services import fallbacks, retry, validator
from services.errors import ResponseValidationError, UpstreamError

logger = logging.getLogger(__name__)


class BaseContentHandler(ABC):
    """One handler per request kind.

    Subclasses must implement:
        - kind / system_prompt / max_tokens: upstream call parameters
        - build_prompt(payload): user prompt for the single upstream call
        - build_response(payload, content): wrap validated content for the client

    ``implements_fallback`` says whether a local substitute exists for the
    kind; ``has_fallback`` is whether this instance is allowed to use it.
    """

    kind: RequestKind
    system_prompt: str = ""
    max_tokens: int = 400
    temperature: float = 0.7
    json_mode: bool = False
    implements_fallback: bool = True

    def __init__(self, fallback_enabled: bool = True) -> None:
        self.has_fallback = self.implements_fallback and fallback_enabled

    @abstractmethod
    def build_prompt(self, payload: Payload) -> str:
        """Natural-language prompt for this payload."""

    @abstractmethod
    def build_response(self, payload: Payload, content: Any) -> BaseModel:
        """Response body built from validated or fallback content."""

    def parse(self, text: str) -> Any:
        if not self.json_mode:
            return text
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ResponseValidationError("AI response was not valid JSON", details=str(e)) from e

    def fallback(self, payload: Payload, rng: random.Random) -> Any:
        return fallbacks.fallback(self.kind, payload, rng)

    async def generate_content(
        self,
        payload: Payload,
        generator: Any,
        policy: retry.RetryPolicy,
        rng: random.Random,
    ) -> Any:
        """Prompt, call upstream with retries, parse and validate."""
        prompt = self.build_prompt(payload)

        async def call() -> str:
            return await generator.generate(
                self.system_prompt,
                prompt,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                json_mode=self.json_mode,
            )

        text = await retry.execute(call, policy, rng=rng)
        return validator.validate(self.kind, self.parse(text))

    async def handle(
        self,
        payload: Payload,
        generator: Any,
        *,
        policy: retry.RetryPolicy = retry.DEFAULT_POLICY,
        rng: random.Random | None = None,
    ) -> BaseModel:
        rng = rng or random.Random()
        try:
            content = await self.generate_content(payload, generator, policy, rng)
        except ResponseValidationError as e:
            if not self.has_fallback:
                raise
            logger.warning("%s: invalid AI output, using fallback (%s)", self.kind.value, e.details or e)
            content = self.fallback(payload, rng)
        except UpstreamError as e:
            if not (self.has_fallback and e.retryable):
                raise
            logger.warning("%s: AI service unavailable, using fallback (%s)", self.kind.value, e.error_class.value)
            content = self.fallback(payload, rng)
        return self.build_response(payload, content)
