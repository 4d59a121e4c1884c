"""
Usage API routes.

Proxy to the billing backend with the caller's bearer token.

Endpoints:
- GET  /api/chat/usage - Current billing period usage
- POST /api/chat/usage - Report tokens consumed by a chat turn
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from janbot.billing import BillingClient, calculate_total_tokens
from janbot.utils.logger import get_logger

from ..dependencies import get_billing_client
from ..models import UsageReportRequest

logger = get_logger(__name__)

router = APIRouter()

_UNAUTHORIZED = {"success": False, "error": "Missing bearer token"}


@router.get("/chat/usage")
async def get_usage(billing: BillingClient | None = Depends(get_billing_client)) -> JSONResponse:
    """
    Example:
        GET /api/chat/usage

        Response:
        {
            "success": true,
            "data": {"used": 12000, "included": 50000, "remaining": 38000, ...}
        }
    """
    if billing is None:
        return JSONResponse(status_code=401, content=_UNAUTHORIZED)

    usage = await billing.get_token_usage()
    return JSONResponse(
        status_code=200 if usage.success else 502,
        content=usage.model_dump(by_alias=True, exclude_none=True),
    )


@router.post("/chat/usage")
async def report_usage(
    report: UsageReportRequest,
    billing: BillingClient | None = Depends(get_billing_client),
) -> JSONResponse:
    if billing is None:
        return JSONResponse(status_code=401, content=_UNAUTHORIZED)

    usage = calculate_total_tokens(report.input_tokens, report.output_tokens)
    if await billing.report_token_usage(usage):
        return JSONResponse(status_code=200, content={"success": True})

    logger.warning("Usage report could not be delivered to billing backend")
    return JSONResponse(status_code=502, content={"success": False, "error": "Failed to report usage"})
