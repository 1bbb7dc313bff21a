"""
Error taxonomy for registry operations.

Every failure raised by the registry client is one of the classes below, so
callers can branch on the class (or on its ``kind`` tag) instead of comparing
against shared error values.
"""


class ImageInfoError(Exception):
    """Base exception for image metadata operations"""

    kind = "error"


class NotFoundError(ImageInfoError):
    """Manifest, image or os-release file does not exist"""

    kind = "not_found"


class RateLimitedError(ImageInfoError):
    """Registry throttled the request (HTTP 429)"""

    kind = "rate_limited"


class AuthError(ImageInfoError):
    """Bearer token could not be obtained"""

    kind = "auth"


class InternalError(ImageInfoError):
    """Transport, status code or body read failure"""

    kind = "internal"


class ParseError(InternalError):
    """Malformed manifest document or incomplete os-release content"""

    kind = "parse"
