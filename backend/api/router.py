import json
import logging

from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_generator
from config import settings
from models.responses import ErrorResponse
from services import ai_router
from services.errors import ErrorCode, InvalidRequestError

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "gemini_configured": bool(settings.gemini_api_key),
        "model": settings.gemini_model,
    }


@router.post(
    "/ai",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@limiter.limit(settings.ai_rate_limit)
async def ai(request: Request, generator=Depends(get_generator)):
    raw = await request.body()
    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidRequestError("Request body is not valid JSON", code=ErrorCode.INVALID_JSON)

    result = await ai_router.dispatch(body, generator)
    return result.model_dump(mode="json", by_alias=True)
