"""
Tests for the process_import tool.
"""

import base64

import httpx
import pytest

from janbot.tools import FileUpload, create_import_tool
from janbot.tools.import_tool import build_app_link, get_mime_type

CSV_BYTES = b"rfc,nombre\nGOMA800101AAA,Ana\n"


@pytest.fixture
def upload() -> FileUpload:
    return FileUpload(
        file_name="clientes.csv",
        entity_type="CLIENT",
        file_content=base64.b64encode(CSV_BYTES).decode(),
    )


@pytest.fixture
def make_tool(openai_only_settings, http_client_factory, upload):
    def _make(handler, org_slug="acme", file_upload=None):
        tools = create_import_tool(
            "jwt-abc",
            file_upload or upload,
            org_slug,
            settings=openai_only_settings,
            http_client=http_client_factory(handler),
        )
        return tools["process_import"]

    return _make


def _created(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        201,
        json={
            "success": True,
            "data": {
                "id": "imp_123",
                "status": "PENDING",
                "totalRows": 1,
                "fileName": "clientes.csv",
            },
        },
    )


class TestProcessImport:
    @pytest.mark.asyncio
    async def test_success_uploads_file_and_links_dashboard(self, make_tool):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _created(request)

        result = await make_tool(handler).execute({"confirm": True})

        assert result.startswith("✅ Import created successfully!")
        assert "- **ID**: imp_123" in result
        assert "(/acme/import/imp_123)" in result
        assert "(/acme/import)" in result

        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "https://aml.test/api/v1/imports"
        assert request.headers["Authorization"] == "Bearer jwt-abc"
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b'name="entityType"' in request.content
        assert b"CLIENT" in request.content
        assert b'filename="clientes.csv"' in request.content
        assert CSV_BYTES in request.content

    @pytest.mark.asyncio
    async def test_links_without_org_slug(self, make_tool):
        result = await make_tool(_created, org_slug=None).execute({})
        assert "(/import/imp_123)" in result

    @pytest.mark.asyncio
    async def test_cancel_makes_no_request(self, make_tool):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _created(request)

        result = await make_tool(handler).execute({"confirm": False})

        assert result == "Import cancelled by user."
        assert seen == []

    @pytest.mark.asyncio
    async def test_rejected_upload_uses_backend_message(self, make_tool):
        tool = make_tool(
            lambda request: httpx.Response(400, json={"message": "Missing column: rfc"})
        )

        result = await tool.execute({})

        assert result.startswith("❌ Error processing import: Missing column: rfc")
        assert "(/acme/import)" in result

    @pytest.mark.asyncio
    async def test_rejected_upload_without_message(self, make_tool):
        tool = make_tool(lambda request: httpx.Response(502, text="Bad Gateway"))

        result = await tool.execute({})

        assert "Upload failed: 502" in result

    @pytest.mark.asyncio
    async def test_unsuccessful_payload(self, make_tool):
        tool = make_tool(lambda request: httpx.Response(200, json={"success": False}))

        assert await tool.execute({}) == "Failed to create import: Unknown error"

    @pytest.mark.asyncio
    async def test_invalid_base64(self, make_tool):
        broken = FileUpload(file_name="clientes.csv", entity_type="CLIENT", file_content="%%%")
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _created(request)

        result = await make_tool(handler, file_upload=broken).execute({})

        assert result.startswith("❌ Error processing import: File content is not valid base64")
        assert seen == []

    def test_description_names_file_and_entity(self, make_tool, openai_only_settings):
        tool = make_tool(_created)
        assert "clientes.csv" in tool.description
        assert "clients" in tool.description

        transactions = FileUpload(
            file_name="ops.xlsx", entity_type="TRANSACTION", file_content="YQ=="
        )
        assert "transactions" in make_tool(_created, file_upload=transactions).description


class TestHelpers:
    @pytest.mark.parametrize(
        ("file_name", "expected"),
        [
            ("clientes.csv", "text/csv"),
            ("OPS.XLSX", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
            ("legacy.xls", "application/vnd.ms-excel"),
            ("notes.txt", "application/octet-stream"),
            ("no_extension", "application/octet-stream"),
        ],
    )
    def test_mime_type(self, file_name, expected):
        assert get_mime_type(file_name) == expected

    def test_app_link(self):
        assert build_app_link("/import", "acme") == "/acme/import"
        assert build_app_link("import/1", None) == "/import/1"

    @pytest.mark.asyncio
    async def test_line_wrapped_base64_is_accepted(self, make_tool):
        large_csv = CSV_BYTES * 20
        wrapped = FileUpload(
            file_name="clientes.csv",
            entity_type="CLIENT",
            file_content=base64.encodebytes(large_csv).decode(),
        )
        uploaded: list[bytes] = []

        def handler(request: httpx.Request) -> httpx.Response:
            uploaded.append(request.content)
            return _created(request)

        result = await make_tool(handler, file_upload=wrapped).execute({})

        assert "\n" in wrapped.file_content.strip()
        assert result.startswith("✅ Import created successfully!")
        assert large_csv in uploaded[0]
