"""Request router: validates the envelope and dispatches to one handler.

Flow:
    {type, data}
      ├─ parse_request()   → AIRequest      (INVALID_TYPE / MISSING_FIELDS on failure)
      ├─ get_handler(kind) → one handler, no fall-through
      └─ handler.handle()  → response model
                               ↓
         any exception      → AIServiceError with a taxonomy code
"""

import logging
import random
from typing import Any

from pydantic import BaseModel, ValidationError

from config import settings
from models.requests import PAYLOAD_MODELS, AIRequest, RequestKind
from services.errors import AIServiceError, ErrorCode, InvalidRequestError
from services.handlers.registry import get_handler
from services.retry import RetryPolicy

logger = logging.getLogger(__name__)


def parse_request(body: Any) -> AIRequest:
    """Validate a decoded request body into an AIRequest."""
    if not isinstance(body, dict) or body.get("type") is None or body.get("data") is None:
        raise InvalidRequestError(
            "Request must include 'type' and 'data'", code=ErrorCode.MISSING_FIELDS
        )

    try:
        kind = RequestKind(body["type"])
    except ValueError:
        raise InvalidRequestError(
            f"Invalid request type: {body['type']!r}",
            code=ErrorCode.INVALID_TYPE,
            details=f"expected one of {', '.join(k.value for k in RequestKind)}",
        )

    data = body["data"]
    if not isinstance(data, dict):
        raise InvalidRequestError("'data' must be an object", code=ErrorCode.MISSING_FIELDS)

    try:
        payload = PAYLOAD_MODELS[kind].model_validate(data)
    except ValidationError as e:
        raise InvalidRequestError(
            f"Invalid data for {kind.value}",
            code=ErrorCode.MISSING_FIELDS,
            details="; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            ),
        ) from e

    return AIRequest(kind=kind, payload=payload)


def _new_rng() -> random.Random:
    return random.Random(settings.fallback_seed) if settings.fallback_seed is not None else random.Random()


async def route(
    request: AIRequest,
    generator: Any,
    *,
    policy: RetryPolicy | None = None,
    rng: random.Random | None = None,
) -> BaseModel:
    """Run the handler for ``request.kind``; every failure leaves as AIServiceError."""
    try:
        handler = get_handler(request.kind)
        policy = policy or RetryPolicy.from_settings(settings)
        return await handler.handle(request.payload, generator, policy=policy, rng=rng or _new_rng())
    except AIServiceError as e:
        logger.error(
            "%s failed: %s [%s]%s",
            request.kind.value, e.message, e.code.value,
            f" ({e.details})" if e.details else "",
        )
        raise
    except Exception as e:
        logger.exception("Unexpected error in %s handler", request.kind.value)
        raise AIServiceError("Failed to process AI request", details=type(e).__name__) from e


async def dispatch(body: Any, generator: Any, **kwargs: Any) -> BaseModel:
    """Validate a decoded body and route it."""
    return await route(parse_request(body), generator, **kwargs)
