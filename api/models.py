# Nothing here is stored in the Django DB.
#
# Firestore Collections:
# - users/{uid}: User data including the push token (fcmToken)
#
# See firebase_service.py for Firestore operations.
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class CallRequest:
    """Validated body of POST /api/send-call"""
    target_user_id: str
    channel_name: str
    caller_id: str
    is_video_call: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CallRequest":
        """Build from a body that already passed validate_call_request()"""
        return cls(
            target_user_id=data["targetUserId"],
            channel_name=data["channelName"],
            caller_id=data["callerId"],
            is_video_call=bool(data.get("isVideoCall") or False),
        )
