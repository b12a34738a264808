"""
Send-call pipeline: gateway init -> token lookup -> message build -> FCM send.

Each stage reports failure as a value; the first failure ends the request.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from . import errors
from .errors import Failure
from .firebase_service import (
    FirebaseGateway,
    FirestoreService,
    firebase_gateway,
    firestore_service,
)
from .models import CallRequest
from .push_service import (
    INVALID_TOKEN,
    FCMService,
    build_call_message,
    fcm_service,
)

logger = logging.getLogger("api")


@dataclass
class CallResult:
    message_id: Optional[str] = None
    failure: Optional[Failure] = None

    @property
    def success(self) -> bool:
        return self.failure is None


class CallNotifier:
    """Relays one call invitation to the target user's device"""

    def __init__(
        self,
        gateway: FirebaseGateway,
        store: FirestoreService,
        sender: FCMService
    ):
        self.gateway = gateway
        self.store = store
        self.sender = sender

    def send_call(self, call: CallRequest) -> CallResult:
        kind = "video" if call.is_video_call else "audio"
        logger.info(
            f"[SEND-CALL] Processing call from {call.caller_id} to {call.target_user_id} "
            f"({kind}) on channel {call.channel_name}"
        )

        failure = self.gateway.ensure_ready()
        if failure:
            logger.error(f"[SEND-CALL] Firebase not ready: {self.gateway.cause}")
            return CallResult(failure=failure)

        lookup = self.store.resolve_push_token(call.target_user_id)
        if not lookup.found:
            return CallResult(failure=lookup.failure)

        message = build_call_message(call, lookup.token)

        logger.info("[SEND-CALL] Sending FCM message...")
        result = self.sender.send(message)

        if result.success:
            return CallResult(message_id=result.message_id)

        logger.warning(f"[SEND-CALL] Push failed ({result.error_code}): {result.error}")
        if result.error_code == INVALID_TOKEN:
            return CallResult(failure=errors.invalid_token_error())
        return CallResult(failure=errors.gateway_error())


# Singleton instance
call_notifier = CallNotifier(firebase_gateway, firestore_service, fcm_service)
