"""AI helper endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from notemind.config import Settings, get_settings
from notemind.dependencies import get_ai_service, get_current_user
from notemind.models.user import User
from notemind.rate_limit import limiter
from notemind.schemas.ai import AISettingsResponse, SummarizeRequest, SummaryResponse
from notemind.services.ai import AIService, mask_api_key

logger = logging.getLogger("notemind")

router = APIRouter(prefix="/api/v1/ai", tags=["AI"])


@router.post("/summarize", response_model=SummaryResponse)
@limiter.limit("20/minute")
def summarize(
    request: Request,
    body: SummarizeRequest,
    user: User = Depends(get_current_user),
    ai_service: AIService = Depends(get_ai_service),
) -> SummaryResponse:
    """Summarize arbitrary text."""
    if not body.text.strip():
        raise HTTPException(status_code=400, detail="Text is required for summarization")

    result = ai_service.summarize(body.text, prompt=body.prompt, length=body.length, allow_fallback=body.allow_fallback)
    return SummaryResponse(summary=result.summary, source=result.source)


@router.get("/settings", response_model=AISettingsResponse)
def ai_settings(
    user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> AISettingsResponse:
    """Show whether an API key is configured, masked."""
    return AISettingsResponse(
        configured=bool(settings.OPENAI_API_KEY),
        api_key=mask_api_key(settings.OPENAI_API_KEY),
        model=settings.OPENAI_MODEL,
    )


@router.get("/test-connection")
@limiter.limit("5/minute")
def test_connection(
    request: Request,
    user: User = Depends(get_current_user),
    ai_service: AIService = Depends(get_ai_service),
) -> dict:
    """Round-trip a trivial prompt to the provider."""
    reply = ai_service.test_connection()
    return {"success": True, "message": f"API connection successful. Response: {reply}"}
