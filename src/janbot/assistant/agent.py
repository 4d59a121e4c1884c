"""
Assistant agent for one chat turn.

Wires a routed model, the per-request toolset and the instructions into a
pydantic-ai Agent, then streams the reply and meters the tokens it used.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from typing import Literal

from pydantic import BaseModel
from pydantic_ai import Agent
from pydantic_ai.messages import (
    ModelMessage,
    ModelRequest,
    ModelResponse,
    SystemPromptPart,
    TextPart,
    UserPromptPart,
)
from pydantic_ai.models import Model
from pydantic_ai.exceptions import UsageLimitExceeded
from pydantic_ai.usage import RunUsage, UsageLimits

from janbot.billing import BillingClient, TokenUsage, calculate_total_tokens
from janbot.tools import FileUpload, ToolSet
from janbot.utils.logger import get_logger

from .prompts import build_system_prompt

logger = get_logger(__name__)

STEP_LIMIT_NOTICE = (
    "\n\n_I reached the step limit for this reply. Ask me to continue if you need more._"
)


class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


def create_assistant_agent(
    model: Model,
    tools: ToolSet | None = None,
    file_upload: FileUpload | None = None,
) -> Agent[None, str]:
    """
    Create the assistant agent for one request.

    Args:
        model: Model handle from ProviderRouter.get_model()
        tools: Per-request toolset (see janbot.tools.build_toolset)
        file_upload: Attached file, adds the import section to the instructions

    Example:
        router = get_router()
        tools = build_toolset(jwt, file_upload, org_slug)
        agent = create_assistant_agent(router.get_model(model="gpt-4o"), tools, file_upload)
        result = await agent.run("¿Cuántos clientes tengo?")
    """
    tools = tools or {}
    logger.info(f"Creating assistant agent: model={model.model_name}, tools={sorted(tools)}")

    # Instructions are re-sent on every request, including when history is given.
    return Agent(
        model,
        instructions=build_system_prompt(file_upload),
        tools=[tool.as_agent_tool() for tool in tools.values()],
    )


def to_message_history(messages: Sequence[ChatMessage]) -> list[ModelMessage]:
    """Convert prior chat messages into pydantic-ai message history."""
    history: list[ModelMessage] = []
    for message in messages:
        if message.role == "assistant":
            history.append(ModelResponse(parts=[TextPart(content=message.content)]))
        elif message.role == "system":
            history.append(ModelRequest(parts=[SystemPromptPart(content=message.content)]))
        else:
            history.append(ModelRequest(parts=[UserPromptPart(content=message.content)]))
    return history


async def stream_chat_turn(
    agent: Agent[None, str],
    messages: Sequence[ChatMessage],
    *,
    max_steps: int = 5,
    billing: BillingClient | None = None,
) -> AsyncIterator[str]:
    """
    Stream the assistant's reply to the last message.

    Tool calls requested by the model run inside the agent loop, capped at
    `max_steps` model requests. Reaching the cap ends the reply with
    STEP_LIMIT_NOTICE instead of an error. Whatever happens to the stream,
    the tokens spent so far are reported to billing (best effort).

    Yields:
        str: Text deltas of the reply
    """
    if not messages:
        raise ValueError("At least one message is required")

    prompt = messages[-1].content
    history = to_message_history(messages[:-1])

    # The agent run adds every model request's tokens to this object.
    run_usage = RunUsage()
    try:
        async with agent.run_stream(
            prompt,
            message_history=history,
            usage_limits=UsageLimits(request_limit=max_steps),
            usage=run_usage,
        ) as result:
            async for chunk in result.stream_text(delta=True):
                yield chunk
    except UsageLimitExceeded as e:
        logger.warning(f"Chat turn stopped at {max_steps} steps: {e}")
        yield STEP_LIMIT_NOTICE
    finally:
        usage: TokenUsage = calculate_total_tokens(
            run_usage.input_tokens or 0, run_usage.output_tokens or 0
        )
        logger.info(
            f"Chat turn finished: input={usage.input_tokens}, output={usage.output_tokens}, "
            f"total={usage.total_tokens}"
        )
        if billing is not None:
            await billing.report_token_usage(usage)
