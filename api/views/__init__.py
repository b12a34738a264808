from .health import health
from .calls import send_call

__all__ = [
    "health",
    "send_call",
]
