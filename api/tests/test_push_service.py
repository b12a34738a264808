import warnings
from unittest.mock import patch

import pytest
from firebase_admin import exceptions as firebase_exceptions
from firebase_admin import messaging

from api import utils
from api.constants import CALL_BODY_AUDIO, CALL_BODY_VIDEO, CALL_TITLE
from api.models import CallRequest
from api.push_service import (
    GATEWAY_ERROR,
    INVALID_TOKEN,
    FCMService,
    build_call_message,
)

from .conftest import FakeGateway


AUDIO_CALL = CallRequest("u1", "ch1", "u2")
VIDEO_CALL = CallRequest("u1", "ch1", "u2", is_video_call=True)


class TestBuildCallMessage:

    def test_data_payload(self):
        message = build_call_message(AUDIO_CALL, "tok123", sent_at_ms=1700000000123)

        assert message.token == "tok123"
        assert message.data == {
            "type": "call",
            "channel_name": "ch1",
            "caller_id": "u2",
            "is_video": "false",
            "timestamp": "1700000000123",
        }

    def test_audio_and_video_text(self):
        audio = build_call_message(AUDIO_CALL, "tok123", sent_at_ms=1)
        video = build_call_message(VIDEO_CALL, "tok123", sent_at_ms=1)

        assert audio.notification.title == CALL_TITLE
        assert audio.notification.body == CALL_BODY_AUDIO
        assert video.notification.body == CALL_BODY_VIDEO
        assert video.data["is_video"] == "true"

    def test_android_block(self):
        android = build_call_message(AUDIO_CALL, "tok123", sent_at_ms=1).android

        assert android.priority == "high"
        assert android.notification.channel_id == "calls"
        assert android.notification.sound == "default"

    def test_apns_block(self):
        aps = build_call_message(VIDEO_CALL, "tok123", sent_at_ms=1).apns.payload.aps

        assert aps.content_available is True
        assert aps.mutable_content is True
        assert aps.alert.title == CALL_TITLE
        assert aps.alert.body == CALL_BODY_VIDEO

    def test_only_timestamp_differs_between_builds(self):
        first = build_call_message(AUDIO_CALL, "tok123", sent_at_ms=1000)
        second = build_call_message(AUDIO_CALL, "tok123", sent_at_ms=2000)

        assert {k: v for k, v in first.data.items() if k != "timestamp"} == \
            {k: v for k, v in second.data.items() if k != "timestamp"}
        assert first.notification.body == second.notification.body

    def test_build_emits_no_sdk_warnings(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            message = build_call_message(VIDEO_CALL, "tok123", sent_at_ms=1)

        assert message.token == "tok123"

    def test_timestamp_defaults_to_clock(self):
        with patch("api.push_service.now_millis", return_value=1234):
            message = build_call_message(AUDIO_CALL, "tok123")

        assert message.data["timestamp"] == "1234"


def test_now_millis_never_goes_backwards():
    with patch("api.utils._last_millis", 0), \
            patch("api.utils.time.time", side_effect=[5000.0, 4000.0, 6000.0]):
        values = [utils.now_millis() for _ in range(3)]

    assert values[0] <= values[1] <= values[2]
    assert values[2] == 6000000


class TestFCMService:

    def _send(self, **patch_kwargs):
        gateway = FakeGateway()
        message = build_call_message(AUDIO_CALL, "tok123", sent_at_ms=1)
        with patch("api.push_service.messaging.send", **patch_kwargs) as send:
            result = FCMService(gateway).send(message)
        return result, send, gateway, message

    def test_success_returns_message_id(self):
        result, send, gateway, message = self._send(return_value="projects/p/messages/42")

        assert result.success
        assert result.message_id == "projects/p/messages/42"
        send.assert_called_once_with(message, app=gateway.app)

    @pytest.mark.parametrize("exc", [
        messaging.UnregisteredError("Requested entity was not found."),
        firebase_exceptions.InvalidArgumentError(
            "The registration token is not a valid FCM registration token"
        ),
    ])
    def test_dead_token_is_invalid_token(self, exc):
        result, send, _, _ = self._send(side_effect=exc)

        assert not result.success
        assert result.error_code == INVALID_TOKEN
        assert send.call_count == 1

    @pytest.mark.parametrize("exc", [
        firebase_exceptions.UnavailableError("FCM is down"),
        firebase_exceptions.InvalidArgumentError("Invalid value at 'message.data'"),
        messaging.SenderIdMismatchError("sender mismatch"),
        RuntimeError("socket closed"),
    ])
    def test_other_errors_are_gateway_errors(self, exc):
        result, send, _, _ = self._send(side_effect=exc)

        assert result.error_code == GATEWAY_ERROR
        assert send.call_count == 1
