from typing import Optional


class InternalException(Exception):
    """
    Raised when an internal error occurs.

    This is raised by default to the caller when
    an unexpected error occurs in a service.
    """
    def __init__(self, message: str = "An internal error occurred."):
        super().__init__(message)


class DomainException(Exception):
    """Base class for domain-specific exceptions."""
    def __init__(self, message: str, log_message: Optional[str] = None):
        super().__init__(message)
        self.log_message = log_message  # In case devs want to include extra log info.


class ImageDecodeError(DomainException):
    """Raised when image bytes cannot be decoded into a pixel buffer"""

    pass


class AnnotationParseError(DomainException):
    """Raised when an annotation file cannot be parsed"""

    pass


class UnsupportedFileTypeError(DomainException):
    """Raised when a file cannot be routed to any loader"""

    pass


class MissingImageError(DomainException):
    """Raised when annotations are loaded before any image"""

    pass
