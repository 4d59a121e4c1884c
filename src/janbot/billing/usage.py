"""
Token usage math for chat billing.

Pure functions only. The billing backend is the system of record; the values
built here are per-request records and display snapshots.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class TokenUsage(BaseModel):
    """Tokens consumed by one chat turn. Immutable once computed."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    input_tokens: int = Field(ge=0)
    output_tokens: int = Field(ge=0)
    total_tokens: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_total(self) -> TokenUsage:
        if self.total_tokens != self.input_tokens + self.output_tokens:
            raise ValueError("total_tokens must equal input_tokens + output_tokens")
        return self


@dataclass(frozen=True)
class UsageTracker:
    """Quota snapshot. `remaining` goes negative when the organization is in overage."""

    limit: int
    used: int
    remaining: int


def create_usage_tracker(limit: int, used: int = 0) -> UsageTracker:
    return UsageTracker(limit=limit, used=used, remaining=limit - used)


def calculate_total_tokens(input_tokens: int, output_tokens: int) -> TokenUsage:
    return TokenUsage(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        total_tokens=input_tokens + output_tokens,
    )


def is_over_limit(used: int, limit: int) -> bool:
    """Strict: using exactly the limit is not over it."""
    return used > limit


def _round_half_up(value: float, decimals: int) -> Decimal:
    return Decimal(str(value)).quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)


def get_usage_percentage(used: float, limit: float, decimals: int = 0) -> float | int:
    """
    Raw quota percentage. Not capped, so overage shows as >100.

    Example:
        get_usage_percentage(150, 100)  # 150
        get_usage_percentage(33.333, 100, decimals=2)  # 33.33
    """
    if limit == 0:
        return 0
    rounded = _round_half_up(used / limit * 100, decimals)
    if decimals == 0:
        return int(rounded)
    return float(rounded)


def calculate_usage_percentage(used: float, included: float) -> int:
    """Progress-bar percentage, clamped to [0, 100]."""
    if included == 0:
        return 0
    percentage = int(_round_half_up(used / included * 100, 0))
    return max(0, min(100, percentage))


def _abbreviate(value: float) -> str:
    text = f"{value:.1f}"
    return text[:-2] if text.endswith(".0") else text


def format_token_count(tokens: int) -> str:
    """
    Abbreviate a token count for display.

    Example:
        format_token_count(999)        # "999"
        format_token_count(1500)       # "1.5K"
        format_token_count(1_000_000)  # "1M"
    """
    if abs(tokens) >= 1_000_000:
        return f"{_abbreviate(tokens / 1_000_000)}M"
    if abs(tokens) >= 1_000:
        return f"{_abbreviate(tokens / 1_000)}K"
    return str(tokens)
