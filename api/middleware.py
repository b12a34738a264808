import logging

from . import errors

logger = logging.getLogger("api")


class JsonExceptionMiddleware:
    """Render anything escaping a view as a JSON 500"""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        logger.exception(
            f"Unhandled error on {request.method} {request.path}: {exception}"
        )
        return errors.unhandled_error().to_response()
