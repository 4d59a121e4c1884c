"""
API request/response models for the chat service.

Field names are snake_case in Python and camelCase on the wire, matching the
dashboard frontend.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from janbot.assistant import ChatMessage
from janbot.tools import FileUpload


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Request Models
# ============================================================================


class ChatRequest(_CamelModel):
    """
    Chat turn from the dashboard.

    Example:
        {
            "messages": [{"role": "user", "content": "¿Cuántas alertas críticas tengo?"}],
            "model": "gpt-4o",
            "orgSlug": "acme-motors"
        }
    """

    messages: list[ChatMessage] = Field(description="Conversation so far, last message last")
    model: str | None = Field(default=None, description="Model id; unknown ids use the default")
    org_slug: str | None = Field(default=None, description="Organization slug for dashboard links")
    file_upload: FileUpload | None = Field(default=None, description="File attached for import")


class UsageReportRequest(_CamelModel):
    input_tokens: int = Field(ge=0)
    output_tokens: int = Field(ge=0)


# ============================================================================
# Response Models
# ============================================================================


class ModelInfo(_CamelModel):
    id: str
    provider: str
    model: str
    display_name: str
    description: str
    max_tokens: int | None = None
    available: bool


class ModelsResponse(_CamelModel):
    models: list[ModelInfo]
    default_model: str


class HealthResponse(_CamelModel):
    status: str = Field(description="healthy or degraded")
    version: str
    services: dict[str, str]
