"""
Error taxonomy for editkit.
Every error carries an HTTP-style status, a code and a message.
"""
from typing import Any, Dict, Optional


class ImageHandlerError(Exception):
    """Base class for structured, classifiable errors."""

    default_status = 500
    default_code = "InternalError"

    def __init__(self, message: str, status: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status = status if status is not None else self.default_status
        self.code = code if code is not None else self.default_code

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status, "code": self.code, "message": self.message}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, code={self.code!r}, message={self.message!r})"


class FetchError(ImageHandlerError):
    """Overlay retrieval or decoding failed."""
    default_code = "FetchError"

    @classmethod
    def from_exception(cls, error: Exception) -> "FetchError":
        """Wrap an arbitrary exception, keeping its status and code when present."""
        status = getattr(error, "status_code", None) or getattr(error, "status", None)
        code = getattr(error, "code", None)
        return cls(
            str(error),
            status=status if isinstance(status, int) else None,
            code=code if isinstance(code, str) else type(error).__name__,
        )


class DecodeError(ImageHandlerError):
    """Image bytes could not be identified."""
    default_status = 400
    default_code = "DecodeError"


class UnsupportedEditError(ImageHandlerError):
    """Edit name is not in the transform table."""
    default_status = 400
    default_code = "UnsupportedEdit"


class UnsupportedFormatError(ImageHandlerError):
    """Requested output format cannot be encoded."""
    default_status = 400
    default_code = "UnsupportedFormat"


class EditError(ImageHandlerError):
    """An edit rejected its parameters or could not be applied."""
    default_status = 400
    default_code = "EditError"
