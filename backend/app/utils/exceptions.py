from fastapi import status


class AppException(Exception):
    """Base application exception"""
    def __init__(self, message: str, status_code: int = 500, error: str = "Internal server error"):
        self.message = message
        self.status_code = status_code
        self.error = error
        super().__init__(self.message)


class BadRequestError(AppException):
    def __init__(self, message: str = "Bad request", error: str = "Bad request"):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, error)
