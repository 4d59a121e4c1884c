"""
File import tool.

The file is attached before the tool is registered; the model only decides
whether to run it. Each confirmed invocation uploads the file once and
creates one import on the AML core API.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from janbot.config.settings import Settings, get_settings
from janbot.utils.http import AuthenticatedClient
from janbot.utils.logger import get_logger

from .base import ToolDefinition, ToolInput, ToolSet

logger = get_logger(__name__)

IMPORTS_ENDPOINT = "/api/v1/imports"

MIME_TYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "xls": "application/vnd.ms-excel",
}


class FileUpload(BaseModel):
    """File attached to the chat turn. `file_content` is base64 encoded."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    file_name: str
    entity_type: Literal["CLIENT", "TRANSACTION"]
    file_content: str

    @property
    def entity_label(self) -> str:
        return "clients" if self.entity_type == "CLIENT" else "transactions"


class ProcessImportInput(ToolInput):
    confirm: bool = Field(default=True, description="Confirm processing the uploaded file")


class ImportRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    status: str
    total_rows: int
    file_name: str


class ImportUploadError(Exception):
    """The import endpoint refused the upload."""


def get_mime_type(file_name: str) -> str:
    extension = file_name.lower().rsplit(".", 1)[-1] if "." in file_name else ""
    return MIME_TYPES.get(extension, "application/octet-stream")


def build_app_link(path: str, org_slug: str | None = None) -> str:
    """Dashboard link, scoped to the organization when a slug is known."""
    if not path.startswith("/"):
        path = f"/{path}"
    return f"/{org_slug}{path}" if org_slug else path


def decode_file_content(file_content: str) -> bytes:
    """Decode base64 content. Line breaks and other whitespace are ignored."""
    compact = "".join(file_content.split())
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImportUploadError(f"File content is not valid base64: {e}") from e


def _upload_error(response: httpx.Response) -> ImportUploadError:
    try:
        body = response.json()
    except json.JSONDecodeError:
        body = {}
    message = body.get("message") if isinstance(body, dict) else None
    return ImportUploadError(message or f"Upload failed: {response.status_code}")


def render_import_success(record: ImportRecord, org_slug: str | None) -> str:
    detail_link = build_app_link(f"/import/{record.id}", org_slug)
    list_link = build_app_link("/import", org_slug)
    return f"""✅ Import created successfully!

**Import Details:**
- **ID**: {record.id}
- **File**: {record.file_name}
- **Status**: {record.status}
- **Total Rows**: {record.total_rows}

The import is now being processed.

👉 **[View Import Status]({detail_link})** | [All Imports]({list_link})

Would you like me to check the import status?"""


def render_import_failure(message: str, org_slug: str | None) -> str:
    imports_link = build_app_link("/import", org_slug)
    return f"""❌ Error processing import: {message}

Please check that:
1. The file format is correct (CSV or Excel)
2. The columns match the expected template
3. You have permission to import data

👉 **[Download templates]({imports_link})**"""


def create_import_tool(
    jwt: str,
    file_upload: FileUpload,
    org_slug: str | None = None,
    *,
    settings: Settings | None = None,
    base_url: str | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> ToolSet:
    """
    Build the `process_import` tool bound to an attached file.

    Args:
        jwt: Caller's bearer token
        file_upload: The attached file (name, entity type, base64 content)
        org_slug: Organization slug used in the returned dashboard links
        settings: Source of AML_CORE_URL and HTTP_TIMEOUT_S
        base_url: Overrides AML_CORE_URL
        http_client: Shared httpx client (tests pass one with a MockTransport)

    Returns:
        ToolSet: {"process_import": ToolDefinition}
    """
    settings = settings or get_settings()
    api = AuthenticatedClient(
        jwt,
        base_url or settings.AML_CORE_URL,
        timeout_s=settings.HTTP_TIMEOUT_S,
        http_client=http_client,
    )

    async def process_import(params: ProcessImportInput) -> str:
        if not params.confirm:
            return "Import cancelled by user."

        try:
            content = decode_file_content(file_upload.file_content)
            mime_type = get_mime_type(file_upload.file_name)
            logger.info(
                f"Uploading import: file={file_upload.file_name}, "
                f"entity={file_upload.entity_type}, bytes={len(content)}"
            )
            response = await api.request(
                "POST",
                IMPORTS_ENDPOINT,
                files={"file": (file_upload.file_name, content, mime_type)},
                data={"entityType": file_upload.entity_type},
            )
            if not response.is_success:
                raise _upload_error(response)

            payload = response.json()
            if not payload.get("success"):
                return "Failed to create import: Unknown error"
            record = ImportRecord.model_validate(payload["data"])
        except Exception as e:
            logger.warning(f"process_import failed: {e}")
            return render_import_failure(str(e) or "Failed to process import", org_slug)

        logger.info(f"Import created: id={record.id}, rows={record.total_rows}")
        return render_import_success(record, org_slug)

    tool = ToolDefinition(
        name="process_import",
        description=(
            f"Process the uploaded file ({file_upload.file_name}) to import "
            f"{file_upload.entity_label}. This will validate and import all rows from the file."
        ),
        input_model=ProcessImportInput,
        handler=process_import,
    )
    return {tool.name: tool}
