import json
from typing import Optional, Tuple

from django.http import JsonResponse

from . import errors


def has_json_content_type(request) -> bool:
    content_type = request.META.get("CONTENT_TYPE") or ""
    return "application/json" in content_type.lower()


def json_body(request) -> Tuple[Optional[dict], Optional[JsonResponse]]:
    try:
        body = request.body.decode("utf-8") if request.body else "{}"
        data = json.loads(body)
        if not isinstance(data, dict):
            raise ValueError("JSON body must be an object")
        return data, None
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as exc:
        return None, errors.validation_error([f"invalid_json: {exc}"]).to_response()


def route_not_found(request, *args, **kwargs):
    return JsonResponse({
        "error": "Not Found",
        "message": f"The requested resource '{request.method} {request.get_full_path()}' "
                   "was not found on this server.",
        "code": "ROUTE_NOT_FOUND",
    }, status=404)
