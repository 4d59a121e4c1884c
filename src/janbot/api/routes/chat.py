"""
Chat API routes.

Endpoints:
- GET  /api/chat/models  - Registered models and which ones can be served
- POST /api/chat         - Stream one assistant turn as plain text
"""

from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response, StreamingResponse

from janbot.assistant import create_assistant_agent, stream_chat_turn
from janbot.billing import BillingClient
from janbot.config.settings import Settings
from janbot.llm import (
    MODEL_CONFIGS,
    ConfigurationError,
    ProviderNotConfiguredError,
    ProviderRouter,
    is_valid_model,
)
from janbot.tools import build_toolset
from janbot.utils.logger import get_logger

from ..dependencies import (
    get_app_settings,
    get_bearer_token,
    get_billing_client,
    get_provider_router,
)
from ..models import ChatRequest, ModelInfo, ModelsResponse

logger = get_logger(__name__)

router = APIRouter()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/chat/models", response_model=ModelsResponse)
async def list_models(
    provider_router: ProviderRouter = Depends(get_provider_router),
) -> ModelsResponse:
    """
    List every registered model, flagging those whose provider has a credential.

    Example:
        GET /api/chat/models

        Response:
        {
            "models": [{"id": "gpt-4o", "provider": "openai", ..., "available": true}],
            "defaultModel": "gpt-4o"
        }
    """
    available = set(provider_router.get_available_models())
    models = [
        ModelInfo(
            id=model_id,
            provider=config.provider.value,
            model=config.model,
            display_name=config.display_name,
            description=config.description,
            max_tokens=config.max_tokens,
            available=model_id in available,
        )
        for model_id, config in MODEL_CONFIGS.items()
    ]
    return ModelsResponse(models=models, default_model=provider_router.default_model)


@router.post("/chat", response_model=None)
async def stream_chat(
    request: ChatRequest,
    jwt: str | None = Depends(get_bearer_token),
    provider_router: ProviderRouter = Depends(get_provider_router),
    billing: BillingClient | None = Depends(get_billing_client),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """
    Run one assistant turn and stream the reply.

    Without a bearer token the assistant answers from general knowledge only
    (no data tools, no metering).
    """
    if not request.messages:
        return _error(400, "Messages array is required")

    model_id = request.model if request.model and is_valid_model(request.model) else None
    if request.model and model_id is None:
        logger.warning(f"Requested unknown model '{request.model}', using default")

    try:
        model = provider_router.get_model(model=model_id)
    except ProviderNotConfiguredError as e:
        logger.error(f"Chat rejected: {e}")
        return _error(503, "AI provider not configured. Please contact support.")
    except ConfigurationError as e:
        logger.error(f"Chat rejected, model configuration error: {e}")
        return _error(500, "Failed to process chat request")

    if billing is not None and not await billing.has_remaining_tokens():
        logger.info("Chat rejected: token quota exhausted")
        return _error(402, "Token quota exhausted for the current billing period")

    tools = build_toolset(jwt, request.file_upload, request.org_slug, settings=settings)
    agent = create_assistant_agent(model, tools, request.file_upload)

    async def body() -> AsyncIterator[str]:
        try:
            async for chunk in stream_chat_turn(
                agent,
                request.messages,
                max_steps=settings.CHAT_MAX_STEPS,
                billing=billing,
            ):
                yield chunk
        except Exception as e:
            # Headers are already sent; the client sees a truncated reply.
            logger.error(f"Chat stream failed: {e}", exc_info=True)

    return StreamingResponse(body(), media_type="text/plain; charset=utf-8")
