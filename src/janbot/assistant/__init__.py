"""
Janbot assistant: agent assembly and the streaming chat turn.
"""

from .agent import (
    STEP_LIMIT_NOTICE,
    ChatMessage,
    create_assistant_agent,
    stream_chat_turn,
    to_message_history,
)
from .prompts import SYSTEM_PROMPT, build_system_prompt

__all__ = [
    "ChatMessage",
    "STEP_LIMIT_NOTICE",
    "SYSTEM_PROMPT",
    "build_system_prompt",
    "create_assistant_agent",
    "stream_chat_turn",
    "to_message_history",
]
