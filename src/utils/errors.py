class VoltAIError(Exception):
    """
    Base class for errors that map onto an http response.

    Args:
        message: message returned to the caller
        status_code: http status code of the response
    """

    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(VoltAIError):
    """missing or malformed required fields"""

    status_code = 400


class NotFoundError(VoltAIError):
    """referenced record does not exist"""

    status_code = 404


class StorageError(VoltAIError):
    """failure inside the persistence layer"""

    status_code = 500
