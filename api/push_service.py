"""
Push notification service for incoming calls (FCM via Firebase Admin SDK).

FCM strips the platform block that does not apply to the target device, so
every message carries both the Android and the APNs configuration.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from firebase_admin import exceptions as firebase_exceptions
from firebase_admin import messaging

from .constants import (
    ANDROID_CHANNEL_ID,
    ANDROID_SOUND,
    CALL_BODY_AUDIO,
    CALL_BODY_VIDEO,
    CALL_TITLE,
)
from .firebase_service import FirebaseGateway, firebase_gateway
from .models import CallRequest
from .utils import now_millis

logger = logging.getLogger("api")

INVALID_TOKEN = "INVALID_TOKEN"
GATEWAY_ERROR = "GATEWAY_ERROR"


@dataclass
class PushResult:
    """Result of a push notification attempt"""
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None


def call_body(is_video_call: bool) -> str:
    return CALL_BODY_VIDEO if is_video_call else CALL_BODY_AUDIO


def build_call_message(
    call: CallRequest,
    token: str,
    sent_at_ms: Optional[int] = None
) -> messaging.Message:
    """
    Build the incoming call message for a single device.

    Args:
        call: Validated call request
        token: Receiver's FCM token
        sent_at_ms: Dispatch time in epoch milliseconds (defaults to now)

    Returns:
        messaging.Message with data, notification, android and apns blocks
    """
    if sent_at_ms is None:
        sent_at_ms = now_millis()

    title = CALL_TITLE
    body = call_body(call.is_video_call)

    # FCM data values must be strings
    data = {
        "type": "call",
        "channel_name": call.channel_name,
        "caller_id": call.caller_id,
        "is_video": "true" if call.is_video_call else "false",
        "timestamp": str(sent_at_ms),
    }

    return messaging.Message(
        token=token,
        data=data,
        notification=messaging.Notification(title=title, body=body),
        android=messaging.AndroidConfig(
            priority="high",
            notification=messaging.AndroidNotification(
                channel_id=ANDROID_CHANNEL_ID,
                sound=ANDROID_SOUND,
            ),
        ),
        apns=messaging.APNSConfig(
            payload=messaging.APNSPayload(
                aps=messaging.Aps(
                    alert=messaging.ApsAlert(title=title, body=body),
                    content_available=True,
                    mutable_content=True,
                )
            )
        ),
    )


def is_invalid_token_error(exc: Exception) -> bool:
    """True for FCM errors meaning the token is dead (unregistered or malformed)"""
    if isinstance(exc, messaging.UnregisteredError):
        return True
    if isinstance(exc, firebase_exceptions.InvalidArgumentError):
        return "registration token" in str(exc).lower()
    return False


class FCMService:
    """
    Firebase Cloud Messaging sender.
    Uses the Firebase Admin app owned by the gateway.
    """

    def __init__(self, gateway: FirebaseGateway):
        self.gateway = gateway

    def send(self, message: messaging.Message) -> PushResult:
        """
        Send a single message. No retry is attempted here.

        Returns:
            PushResult with the FCM message id, or error_code INVALID_TOKEN /
            GATEWAY_ERROR
        """
        try:
            response = messaging.send(message, app=self.gateway.app)
        except Exception as e:
            if is_invalid_token_error(e):
                logger.warning(f"[FCM] Token rejected: {(message.token or '')[:20]}... ({e})")
                return PushResult(success=False, error=str(e), error_code=INVALID_TOKEN)
            logger.error(f"[FCM] Send error: {e}")
            return PushResult(success=False, error=str(e), error_code=GATEWAY_ERROR)

        logger.info(f"[FCM] Message sent successfully: {response}")
        return PushResult(success=True, message_id=response)


# Singleton instance
fcm_service = FCMService(firebase_gateway)
