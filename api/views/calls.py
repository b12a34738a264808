import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt

from .. import call_service, errors
from ..http import has_json_content_type, json_body, route_not_found
from ..models import CallRequest
from ..utils import validate_call_request

logger = logging.getLogger("api")


@csrf_exempt
def send_call(request):
    """
    Send an incoming call push to the target user's device.
    """
    logger.info(f"[SEND-CALL] {request.method} from {request.META.get('REMOTE_ADDR')}")

    if request.method != "POST":
        return route_not_found(request)

    if not has_json_content_type(request):
        logger.warning(f"[SEND-CALL] Unsupported Media Type: {request.META.get('CONTENT_TYPE')}")
        return errors.precondition_error().to_response()

    data, error = json_body(request)
    if error:
        logger.error("[SEND-CALL] Invalid JSON body")
        return error

    validation_errors = validate_call_request(data)
    if validation_errors:
        logger.error(f"[SEND-CALL] Validation failed: {validation_errors}")
        return errors.validation_error(validation_errors).to_response()

    call = CallRequest.from_dict(data)
    result = call_service.call_notifier.send_call(call)

    if not result.success:
        return result.failure.to_response()

    return JsonResponse({
        "success": True,
        "messageId": result.message_id,
        "details": "Call notification sent via FCM HTTP v1 API",
    })
