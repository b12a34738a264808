import platform

from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt

from ..firebase_service import firebase_gateway
from ..http import route_not_found


@csrf_exempt
def health(request):
    if request.method != "GET":
        return route_not_found(request)

    return JsonResponse({
        "message": "Call push relay is running!",
        "timestamp": timezone.now().isoformat(),
        "python_version": platform.python_version(),
        "firebase_initialized": firebase_gateway.is_ready(),
    })
