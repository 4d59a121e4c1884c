"""
Chat usage metering: quota math plus the billing backend client.
"""

from .client import BillingClient, TokenUsageResponse, UsageSnapshot
from .usage import (
    TokenUsage,
    UsageTracker,
    calculate_total_tokens,
    calculate_usage_percentage,
    create_usage_tracker,
    format_token_count,
    get_usage_percentage,
    is_over_limit,
)

__all__ = [
    "BillingClient",
    "TokenUsageResponse",
    "UsageSnapshot",
    "TokenUsage",
    "UsageTracker",
    "calculate_total_tokens",
    "calculate_usage_percentage",
    "create_usage_tracker",
    "format_token_count",
    "get_usage_percentage",
    "is_over_limit",
]
