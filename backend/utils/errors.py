# utils/errors.py
from fastapi import Response, status
from fastapi.responses import PlainTextResponse


class ApiError(Exception):
    """Terminal failure of a request, rendered by the pipeline as an HTTP response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, reason: str = None):
        super().__init__(reason or self.__class__.__name__)
        self.reason = reason

    def to_response(self) -> Response:
        if self.reason:
            return PlainTextResponse(self.reason, status_code=self.status_code)
        return Response(status_code=self.status_code)


# Missing, malformed or expired credentials
class Unauthenticated(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self):
        super().__init__()


# Authenticated but not allowed, reported with the same bare 401
class Forbidden(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self):
        super().__init__()


class ValidationFailed(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, reason: str):
        super().__init__(reason)


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, reason: str):
        super().__init__(reason)


# Unexpected store or infrastructure error, details stay in the server log
class InternalFailure(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self):
        super().__init__()
