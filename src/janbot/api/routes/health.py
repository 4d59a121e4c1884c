"""
Health check routes.

Endpoints for monitoring service health and provider configuration.
"""

from fastapi import APIRouter, Depends

from janbot import __version__
from janbot.llm import ConfigurationError, LlmProvider, ProviderRouter
from janbot.utils.logger import get_logger

from ..dependencies import get_provider_router
from ..models import HealthResponse

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(
    provider_router: ProviderRouter = Depends(get_provider_router),
) -> HealthResponse:
    """
    Health check endpoint.

    Example:
        GET /api/health

        Response:
        {
            "status": "degraded",
            "version": "0.1.0",
            "services": {"openai": "configured", "anthropic": "not_configured", ...}
        }
    """
    services = {
        provider.value: (
            "configured" if provider_router.is_provider_configured(provider) else "not_configured"
        )
        for provider in LlmProvider
    }
    services["config"] = "loaded"

    # Degraded as soon as one vendor is missing: its models disappear from the picker.
    status = "healthy" if "not_configured" not in services.values() else "degraded"
    return HealthResponse(status=status, version=__version__, services=services)


@router.get("/health/ready")
async def readiness_check(
    provider_router: ProviderRouter = Depends(get_provider_router),
) -> dict[str, object]:
    """
    Readiness check for Kubernetes.

    Ready once the default model's provider has a credential.
    """
    try:
        provider = provider_router.provider_for_model(provider_router.default_model)
    except ConfigurationError as e:
        return {"ready": False, "reason": str(e)}

    if not provider_router.is_provider_configured(provider):
        return {"ready": False, "reason": f"{provider.value} API key not configured"}

    return {"ready": True}


@router.get("/health/live")
async def liveness_check() -> dict[str, bool]:
    """
    Liveness check for Kubernetes.

    Returns 200 if service is alive (even if degraded).
    """
    return {"alive": True}
