"""
Common shape for assistant tools.

A tool is a description the model reads, a pydantic input model, and an async
handler that returns text. `ToolDefinition.execute` never raises: invalid
arguments and handler failures both come back as strings starting with
"Error", which the orchestration loop hands to the model like any result.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel
from pydantic_ai import Tool

from janbot.utils.logger import get_logger

logger = get_logger(__name__)

InputT = TypeVar("InputT", bound=BaseModel)

ERROR_PREFIX = "Error"


class ToolInput(BaseModel):
    """Base for tool inputs. Field names are exposed to the model in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class NoArguments(ToolInput):
    """Input for tools that take no parameters."""


def format_validation_error(error: ValidationError) -> str:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'input'}: {err['msg']}"
        for err in error.errors()
    )
    return details or str(error)


@dataclass
class ToolDefinition(Generic[InputT]):
    """
    A model-invokable action.

    Example:
        tool = ToolDefinition(
            name="get_client_stats",
            description="Client totals by person type",
            input_model=NoArguments,
            handler=fetch_client_stats,
        )
        text = await tool.execute({})
    """

    name: str
    description: str
    input_model: type[InputT]
    handler: Callable[[InputT], Awaitable[str]]

    @property
    def input_schema(self) -> dict[str, Any]:
        """JSON schema of the input, as sent to the model."""
        return self.input_model.model_json_schema(by_alias=True)

    def validate_input(self, args: Mapping[str, Any] | InputT | None) -> InputT:
        if isinstance(args, self.input_model):
            return args
        return self.input_model.model_validate(dict(args or {}))

    async def execute(self, args: Mapping[str, Any] | InputT | None = None) -> str:
        """Validate `args`, run the handler, and always return text."""
        try:
            params = self.validate_input(args)
        except ValidationError as e:
            logger.warning(f"Tool {self.name} rejected arguments: {e.error_count()} errors")
            return f"{ERROR_PREFIX}: invalid arguments for {self.name}: {format_validation_error(e)}"
        except (TypeError, ValueError) as e:
            # Arguments that are not a mapping at all, e.g. a raw JSON string
            logger.warning(f"Tool {self.name} got non-mapping arguments: {type(args).__name__}")
            return f"{ERROR_PREFIX}: invalid arguments for {self.name}: expected an object ({e})"

        try:
            result = await self.handler(params)
        except Exception as e:
            logger.error(f"Tool {self.name} failed: {e}", exc_info=True)
            return f"{ERROR_PREFIX} running {self.name}: {e}"

        logger.debug(f"Tool {self.name} returned {len(result)} chars")
        return result

    def as_agent_tool(self) -> Tool[Any]:
        """Expose this definition to a pydantic-ai Agent."""

        async def invoke(**kwargs: Any) -> str:
            return await self.execute(kwargs)

        return Tool.from_schema(
            invoke,
            name=self.name,
            description=self.description,
            json_schema=self.input_schema,
        )


ToolSet = dict[str, ToolDefinition[Any]]
