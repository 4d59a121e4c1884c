"""
Read-only data tools.

Each tool performs one authenticated GET against the AML core API and reduces
the JSON to a short text summary (counts plus the first page as bullets), so
tool results stay small in the model's context.
"""

from __future__ import annotations

from typing import Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from janbot.config.settings import Settings, get_settings
from janbot.utils.http import AuthenticatedClient
from janbot.utils.logger import get_logger

from .base import NoArguments, ToolDefinition, ToolInput, ToolSet

logger = get_logger(__name__)

# ============================================================================
# Input models
# ============================================================================


class PageInput(ToolInput):
    limit: int = Field(default=10, ge=1, le=50, description="Number of results to return (max 50)")
    page: int = Field(default=1, ge=1, description="Page number")


class ListClientsInput(PageInput):
    search: str | None = Field(default=None, description="Search by name, RFC, or email")
    person_type: Literal["PHYSICAL", "MORAL", "TRUST"] | None = Field(
        default=None, description="Filter by person type"
    )


class ListOperationsInput(PageInput):
    client_id: str | None = Field(default=None, description="Filter by client ID")
    operation_type: Literal["PURCHASE", "SALE"] | None = Field(
        default=None, description="Filter by operation type"
    )
    vehicle_type: Literal["LAND", "MARINE", "AIR"] | None = Field(
        default=None, description="Filter by vehicle type"
    )


class ListAlertsInput(PageInput):
    status: Literal["DETECTED", "FILE_GENERATED", "SUBMITTED", "CANCELLED", "OVERDUE"] | None = (
        Field(default=None, description="Filter by alert status")
    )
    severity: Literal["LOW", "MEDIUM", "HIGH", "CRITICAL"] | None = Field(
        default=None, description="Filter by severity level"
    )


class ListReportsInput(PageInput):
    type: Literal["MONTHLY", "QUARTERLY", "ANNUAL", "CUSTOM"] | None = Field(
        default=None, description="Filter by report type"
    )
    status: Literal["DRAFT", "GENERATED", "SUBMITTED", "REJECTED"] | None = Field(
        default=None, description="Filter by report status"
    )


# ============================================================================
# Backend payloads
# ============================================================================


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Pagination(_Payload):
    total: int
    page: int
    limit: int
    total_pages: int


class ClientStats(_Payload):
    total_clients: int
    physical_clients: int
    moral_clients: int


class OperationStats(_Payload):
    operations_today: int
    suspicious_operations: int
    total_volume: str


class ClientRecord(_Payload):
    id: str
    rfc: str
    person_type: str
    first_name: str | None = None
    last_name: str | None = None
    business_name: str | None = None
    email: str | None = None

    @property
    def display_name(self) -> str:
        if self.person_type == "MORAL":
            return self.business_name or ""
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class OperationRecord(_Payload):
    id: str
    operation_type: str
    vehicle_type: str
    vehicle_brand: str | None = None
    vehicle_model: str | None = None
    vehicle_year: int | None = None
    amount: float
    operation_date: str

    @property
    def vehicle(self) -> str:
        parts = [str(self.vehicle_year or ""), self.vehicle_brand or "", self.vehicle_model or ""]
        return " ".join(parts).strip()


class AlertRecord(_Payload):
    id: str
    status: str
    severity: str
    description: str
    detected_at: str
    deadline: str | None = None


class ReportRecord(_Payload):
    id: str
    type: str
    status: str
    period_start: str
    period_end: str
    created_at: str | None = None


class ClientPage(_Payload):
    data: list[ClientRecord]
    pagination: Pagination


class OperationPage(_Payload):
    data: list[OperationRecord]
    pagination: Pagination


class AlertPage(_Payload):
    data: list[AlertRecord]
    pagination: Pagination


class ReportPage(_Payload):
    data: list[ReportRecord]
    pagination: Pagination


# ============================================================================
# Rendering
# ============================================================================


def format_amount(amount: float) -> str:
    """Thousands separators and at most three decimals, trailing zeros dropped."""
    return f"{amount:,.3f}".rstrip("0").rstrip(".")


def _summarize(noun: str, lines: list[str], pagination: Pagination) -> str:
    if not lines:
        return f"No {noun} found matching the criteria."
    header = (
        f"Found {pagination.total} {noun} "
        f"(showing {len(lines)} on page {pagination.page}):"
    )
    return "\n".join([header, *lines])


def _query(params: ToolInput) -> dict[str, object]:
    return params.model_dump(by_alias=True, exclude_none=True)


# ============================================================================
# Tool factory
# ============================================================================


def create_data_tools(
    jwt: str,
    *,
    settings: Settings | None = None,
    base_url: str | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> ToolSet:
    """
    Build the read-only data tools for one caller.

    One instance per request: the JWT is captured by every tool and must not
    be shared across users.

    Args:
        jwt: Caller's bearer token for the AML core API
        settings: Source of AML_CORE_URL and HTTP_TIMEOUT_S
        base_url: Overrides AML_CORE_URL
        http_client: Shared httpx client (tests pass one with a MockTransport)

    Returns:
        ToolSet: tool name -> ToolDefinition
    """
    settings = settings or get_settings()
    api = AuthenticatedClient(
        jwt,
        base_url or settings.AML_CORE_URL,
        timeout_s=settings.HTTP_TIMEOUT_S,
        http_client=http_client,
    )

    async def get_client_stats(_: NoArguments) -> str:
        try:
            stats = ClientStats.model_validate(await api.get_json("/api/v1/clients/stats"))
        except Exception as e:
            logger.warning(f"get_client_stats failed: {e}")
            return f"Error fetching client stats: {e}"
        return (
            f"Total clients: {stats.total_clients} "
            f"({stats.physical_clients} physical persons, {stats.moral_clients} companies)"
        )

    async def get_operation_stats(_: NoArguments) -> str:
        try:
            stats = OperationStats.model_validate(await api.get_json("/api/v1/operations/stats"))
        except Exception as e:
            logger.warning(f"get_operation_stats failed: {e}")
            return f"Error fetching operation stats: {e}"
        return (
            f"Operations today: {stats.operations_today}, "
            f"Suspicious: {stats.suspicious_operations}, "
            f"Total volume: {stats.total_volume}"
        )

    async def list_clients(params: ListClientsInput) -> str:
        try:
            result = ClientPage.model_validate(await api.get_json("/api/v1/clients", _query(params)))
        except Exception as e:
            logger.warning(f"list_clients failed: {e}")
            return f"Error fetching clients: {e}"
        lines = [
            f"- {c.display_name} (RFC: {c.rfc}, Type: {c.person_type})" for c in result.data
        ]
        return _summarize("clients", lines, result.pagination)

    async def list_operations(params: ListOperationsInput) -> str:
        try:
            result = OperationPage.model_validate(
                await api.get_json("/api/v1/operations", _query(params))
            )
        except Exception as e:
            logger.warning(f"list_operations failed: {e}")
            return f"Error fetching operations: {e}"
        lines = [
            f"- {op.operation_type}: {op.vehicle} ({op.vehicle_type}) "
            f"- ${format_amount(op.amount)} on {op.operation_date}"
            for op in result.data
        ]
        return _summarize("operations", lines, result.pagination)

    async def list_alerts(params: ListAlertsInput) -> str:
        try:
            result = AlertPage.model_validate(await api.get_json("/api/v1/alerts", _query(params)))
        except Exception as e:
            logger.warning(f"list_alerts failed: {e}")
            return f"Error fetching alerts: {e}"
        lines = [
            f"- [{a.severity}] {a.description} (Status: {a.status}, Detected: {a.detected_at})"
            for a in result.data
        ]
        return _summarize("alerts", lines, result.pagination)

    async def list_reports(params: ListReportsInput) -> str:
        try:
            result = ReportPage.model_validate(await api.get_json("/api/v1/reports", _query(params)))
        except Exception as e:
            logger.warning(f"list_reports failed: {e}")
            return f"Error fetching reports: {e}"
        lines = [
            f"- {r.type} Report ({r.period_start} to {r.period_end}) - Status: {r.status}"
            for r in result.data
        ]
        return _summarize("reports", lines, result.pagination)

    tools: list[ToolDefinition] = [
        ToolDefinition(
            name="get_client_stats",
            description=(
                "Get statistics about clients in the organization, including total count "
                "and breakdown by type (physical/moral persons)"
            ),
            input_model=NoArguments,
            handler=get_client_stats,
        ),
        ToolDefinition(
            name="get_operation_stats",
            description=(
                "Get statistics about operations, including today's count, "
                "suspicious count, and total volume"
            ),
            input_model=NoArguments,
            handler=get_operation_stats,
        ),
        ToolDefinition(
            name="list_clients",
            description=(
                "List clients in the organization with optional filters. "
                "Returns paginated results."
            ),
            input_model=ListClientsInput,
            handler=list_clients,
        ),
        ToolDefinition(
            name="list_operations",
            description=(
                "List operations in the organization with optional filters. "
                "Returns paginated results."
            ),
            input_model=ListOperationsInput,
            handler=list_operations,
        ),
        ToolDefinition(
            name="list_alerts",
            description="List alerts (unusual operations) in the organization with optional filters.",
            input_model=ListAlertsInput,
            handler=list_alerts,
        ),
        ToolDefinition(
            name="list_reports",
            description="List compliance reports in the organization with optional filters.",
            input_model=ListReportsInput,
            handler=list_reports,
        ),
    ]
    return {tool.name: tool for tool in tools}
