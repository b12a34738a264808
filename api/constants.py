# Must be registered by the Android app
ANDROID_CHANNEL_ID = "calls"
ANDROID_SOUND = "default"

CALL_TITLE = "Входящий звонок"
CALL_BODY_AUDIO = "Аудиовызов"
CALL_BODY_VIDEO = "Видеовызов"

REQUIRED_CALL_FIELDS = ("targetUserId", "channelName", "callerId")
