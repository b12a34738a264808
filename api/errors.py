"""
Failure kinds reported by the send-call pipeline.

Stages return a Failure instead of raising; the view renders it once.
"""
from dataclasses import dataclass
from typing import List, Optional

from django.http import JsonResponse

PRECONDITION = "precondition"
VALIDATION = "validation"
CONFIGURATION = "configuration"
NOT_FOUND = "not_found"
UNAVAILABLE_TARGET = "unavailable_target"
STORE = "store"
INVALID_TOKEN = "invalid_token"
GATEWAY = "gateway"
UNHANDLED = "unhandled"


@dataclass(frozen=True)
class Failure:
    """A terminal pipeline outcome other than success"""
    kind: str
    status: int
    error: str
    message: Optional[str] = None
    details: Optional[List[str]] = None

    def to_dict(self) -> dict:
        body = {"error": self.error}
        if self.message is not None:
            body["message"] = self.message
        if self.details is not None:
            body["details"] = list(self.details)
        return body

    def to_response(self) -> JsonResponse:
        return JsonResponse(self.to_dict(), status=self.status)


def precondition_error() -> Failure:
    return Failure(
        kind=PRECONDITION,
        status=415,
        error="Unsupported Media Type",
        message="Content-Type must be application/json",
    )


def validation_error(details: List[str]) -> Failure:
    return Failure(
        kind=VALIDATION,
        status=400,
        error="Bad Request",
        message="Invalid request body",
        details=list(details),
    )


def configuration_error() -> Failure:
    return Failure(
        kind=CONFIGURATION,
        status=500,
        error="Server Configuration Error",
        message="Server not ready: Firebase Admin SDK initialization failed",
    )


def not_found_error() -> Failure:
    return Failure(kind=NOT_FOUND, status=404, error="Target user not found")


def unavailable_target_error() -> Failure:
    return Failure(
        kind=UNAVAILABLE_TARGET,
        status=400,
        error="Target user has no FCM token or is not registered for push notifications",
    )


def store_error() -> Failure:
    return Failure(
        kind=STORE,
        status=500,
        error="Database Error",
        message="Failed to retrieve user information",
    )


def invalid_token_error() -> Failure:
    return Failure(
        kind=INVALID_TOKEN,
        status=400,
        error="Invalid Token",
        message=(
            "The provided FCM token is invalid or not registered. "
            "The user may have uninstalled the app."
        ),
    )


def gateway_error() -> Failure:
    return Failure(
        kind=GATEWAY,
        status=503,
        error="Notification Service Error",
        message="Failed to send notification via FCM. Please try again later.",
    )


def unhandled_error() -> Failure:
    return Failure(
        kind=UNHANDLED,
        status=500,
        error="Internal Server Error",
        message="An unexpected error occurred on the server.",
    )
