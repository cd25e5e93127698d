"""
utils/exceptions.py

- 성적 도메인 공통 예외
- 각 예외는 HTTP 상태 코드와 에러 코드를 가지고 있고,
  middlewares/error_handler.py에서 표준 에러 응답으로 변환됨
"""


class ResultsError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"
    default_message = "Server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(ResultsError):
    status_code = 400
    code = "VALIDATION_FAILED"
    default_message = "Invalid input"


class Unauthenticated(ResultsError):
    status_code = 401
    code = "UNAUTHENTICATED"
    default_message = "No token provided, authorization denied"


class AuthorizationDenied(ResultsError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Access denied"


class NotFound(ResultsError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class ReferenceInvalid(NotFound):
    code = "REFERENCE_INVALID"
    default_message = "Referenced student or subject does not exist"


class Conflict(ResultsError):
    status_code = 409
    code = "CONFLICT"
    default_message = "Result was modified concurrently, please retry"


class StorageUnavailable(ResultsError):
    status_code = 500
    code = "STORAGE_UNAVAILABLE"
    default_message = "Storage is unavailable"
