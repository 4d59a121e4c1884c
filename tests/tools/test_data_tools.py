"""
Tests for the read-only data tools against a mocked AML core API.
"""

import httpx
import pytest

from janbot.tools import build_toolset, create_data_tools
from janbot.tools.data_tools import format_amount

DATA_TOOL_NAMES = {
    "get_client_stats",
    "get_operation_stats",
    "list_clients",
    "list_operations",
    "list_alerts",
    "list_reports",
}


def _page(data: list[dict], total: int | None = None) -> dict:
    return {
        "data": data,
        "pagination": {
            "total": len(data) if total is None else total,
            "page": 1,
            "limit": 10,
            "totalPages": 1,
        },
    }


@pytest.fixture
def make_tools(openai_only_settings, http_client_factory):
    def _make(handler):
        return create_data_tools(
            "jwt-abc",
            settings=openai_only_settings,
            http_client=http_client_factory(handler),
        )

    return _make


class TestToolset:
    def test_no_jwt_no_tools(self, openai_only_settings):
        assert build_toolset(None, settings=openai_only_settings) == {}
        assert build_toolset("", settings=openai_only_settings) == {}

    def test_jwt_gives_data_tools(self, openai_only_settings):
        tools = build_toolset("jwt-abc", settings=openai_only_settings)
        assert set(tools) == DATA_TOOL_NAMES

    def test_file_upload_adds_import_tool(self, openai_only_settings):
        from janbot.tools import FileUpload

        upload = FileUpload(file_name="clientes.csv", entity_type="CLIENT", file_content="YQ==")
        tools = build_toolset("jwt-abc", upload, "acme", settings=openai_only_settings)
        assert set(tools) == DATA_TOOL_NAMES | {"process_import"}


class TestStats:
    @pytest.mark.asyncio
    async def test_client_stats(self, make_tools):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200, json={"totalClients": 3, "physicalClients": 2, "moralClients": 1}
            )

        result = await make_tools(handler)["get_client_stats"].execute({})

        assert result == "Total clients: 3 (2 physical persons, 1 companies)"
        assert str(seen[0].url) == "https://aml.test/api/v1/clients/stats"
        assert seen[0].headers["Authorization"] == "Bearer jwt-abc"

    @pytest.mark.asyncio
    async def test_operation_stats(self, make_tools):
        tools = make_tools(
            lambda request: httpx.Response(
                200,
                json={
                    "operationsToday": 4,
                    "suspiciousOperations": 1,
                    "totalVolume": "1250000.00",
                },
            )
        )

        result = await tools["get_operation_stats"].execute({})

        assert result == "Operations today: 4, Suspicious: 1, Total volume: 1250000.00"

    @pytest.mark.asyncio
    async def test_server_error_is_returned_as_text(self, make_tools):
        tools = make_tools(lambda request: httpx.Response(500, text="Internal Server Error"))

        result = await tools["get_client_stats"].execute({})

        assert result.startswith("Error fetching client stats")
        assert "500" in result

    @pytest.mark.asyncio
    async def test_unreachable_backend_is_returned_as_text(self, make_tools):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = await make_tools(handler)["get_operation_stats"].execute({})

        assert result.startswith("Error fetching operation stats")


class TestListings:
    @pytest.mark.asyncio
    async def test_list_clients(self, make_tools):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json=_page(
                    [
                        {
                            "id": "c1",
                            "rfc": "GOMA800101AAA",
                            "personType": "PHYSICAL",
                            "firstName": "Ana",
                            "lastName": "Gómez",
                        },
                        {
                            "id": "c2",
                            "rfc": "ACM010101BBB",
                            "personType": "MORAL",
                            "businessName": "Acme Motors SA de CV",
                        },
                    ],
                    total=12,
                ),
            )

        result = await make_tools(handler)["list_clients"].execute(
            {"personType": "PHYSICAL", "search": "", "limit": 5}
        )

        assert result.splitlines() == [
            "Found 12 clients (showing 2 on page 1):",
            "- Ana Gómez (RFC: GOMA800101AAA, Type: PHYSICAL)",
            "- Acme Motors SA de CV (RFC: ACM010101BBB, Type: MORAL)",
        ]
        # Unset and empty filters are not sent
        assert dict(seen[0].url.params) == {"limit": "5", "page": "1", "personType": "PHYSICAL"}

    @pytest.mark.asyncio
    async def test_list_operations(self, make_tools):
        tools = make_tools(
            lambda request: httpx.Response(
                200,
                json=_page(
                    [
                        {
                            "id": "op1",
                            "operationType": "PURCHASE",
                            "vehicleType": "LAND",
                            "vehicleBrand": "Toyota",
                            "vehicleModel": "Hilux",
                            "vehicleYear": 2023,
                            "amount": 850000.5,
                            "operationDate": "2025-01-15",
                        }
                    ]
                ),
            )
        )

        result = await tools["list_operations"].execute({})

        assert "- PURCHASE: 2023 Toyota Hilux (LAND) - $850,000.5 on 2025-01-15" in result

    @pytest.mark.asyncio
    async def test_list_alerts(self, make_tools):
        tools = make_tools(
            lambda request: httpx.Response(
                200,
                json=_page(
                    [
                        {
                            "id": "a1",
                            "status": "DETECTED",
                            "severity": "CRITICAL",
                            "description": "Cash payment above threshold",
                            "detectedAt": "2025-01-10",
                        }
                    ]
                ),
            )
        )

        result = await tools["list_alerts"].execute({"severity": "CRITICAL"})

        assert "- [CRITICAL] Cash payment above threshold (Status: DETECTED, Detected: 2025-01-10)" in result

    @pytest.mark.asyncio
    async def test_list_reports(self, make_tools):
        tools = make_tools(
            lambda request: httpx.Response(
                200,
                json=_page(
                    [
                        {
                            "id": "r1",
                            "type": "MONTHLY",
                            "status": "SUBMITTED",
                            "periodStart": "2024-12-01",
                            "periodEnd": "2024-12-31",
                        }
                    ]
                ),
            )
        )

        result = await tools["list_reports"].execute({"type": "MONTHLY"})

        assert "- MONTHLY Report (2024-12-01 to 2024-12-31) - Status: SUBMITTED" in result

    @pytest.mark.asyncio
    async def test_empty_result(self, make_tools):
        tools = make_tools(lambda request: httpx.Response(200, json=_page([])))

        assert await tools["list_alerts"].execute({}) == "No alerts found matching the criteria."

    @pytest.mark.asyncio
    async def test_invalid_filter_never_reaches_backend(self, make_tools):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_page([]))

        tools = make_tools(handler)

        result = await tools["list_alerts"].execute({"severity": "EXTREME"})
        too_many = await tools["list_clients"].execute({"limit": 100})

        assert result.startswith("Error: invalid arguments for list_alerts")
        assert too_many.startswith("Error: invalid arguments for list_clients")
        assert seen == []

    @pytest.mark.asyncio
    async def test_malformed_payload_is_returned_as_text(self, make_tools):
        tools = make_tools(lambda request: httpx.Response(200, json={"items": []}))

        result = await tools["list_reports"].execute({})

        assert result.startswith("Error fetching reports")


class TestFormatAmount:
    @pytest.mark.parametrize(
        ("amount", "expected"),
        [
            (850000, "850,000"),
            (850000.5, "850,000.5"),
            (1234.56, "1,234.56"),
            (12.3456, "12.346"),
            (0.125, "0.125"),
            (0, "0"),
        ],
    )
    def test_format_amount(self, amount, expected):
        assert format_amount(amount) == expected


class TestNonMappingArguments:
    @pytest.mark.asyncio
    async def test_json_string_arguments_never_raise(self, make_tools):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_page([]))

        result = await make_tools(handler)["list_clients"].execute('{"limit": 5}')

        assert result.startswith("Error: invalid arguments for list_clients")
        assert seen == []
