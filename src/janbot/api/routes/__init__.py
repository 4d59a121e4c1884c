from .chat import list_models, stream_chat
from .health import health_check, liveness_check, readiness_check
from .usage import get_usage, report_usage

__all__ = [
    "stream_chat",
    "list_models",
    "health_check",
    "liveness_check",
    "readiness_check",
    "get_usage",
    "report_usage",
]
