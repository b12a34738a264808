import threading
import time
from typing import Any, Dict, List

from .constants import REQUIRED_CALL_FIELDS

_clock_lock = threading.Lock()
_last_millis = 0


def now_millis() -> int:
    """Epoch milliseconds, never lower than a previously returned value."""
    global _last_millis
    with _clock_lock:
        current = max(int(time.time() * 1000), _last_millis)
        _last_millis = current
        return current


def validate_call_request(data: Dict[str, Any]) -> List[str]:
    """
    Check a send-call body. Returns every violation, empty list when valid.
    """
    errors = []
    for field in REQUIRED_CALL_FIELDS:
        value = data.get(field)
        if not value or not isinstance(value, str):
            errors.append(f"{field} is required and must be a string")

    # Document ids cannot address a nested path under users/
    target = data.get("targetUserId")
    if isinstance(target, str) and "/" in target:
        errors.append("targetUserId must not contain '/'")

    is_video = data.get("isVideoCall")
    if is_video is not None and not isinstance(is_video, bool):
        errors.append("isVideoCall must be a boolean")

    return errors
