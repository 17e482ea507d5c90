from __future__ import annotations

from typing import Optional


class S3ProvError(Exception):
    """Base exception for the S3 provisioning handlers."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ConfigError(S3ProvError):
    pass


class MalformedIdentifier(S3ProvError):
    """Raised when a persisted resource id does not match an accepted shape."""

    def __init__(self, raw_id: str, message: str) -> None:
        super().__init__(message)
        self.raw_id = raw_id


class HandlerError(S3ProvError):
    def __init__(self, message: str, *, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.code = code


EXIT_CODES: dict[type[S3ProvError], int] = {
    S3ProvError: 1,
    ConfigError: 2,
    MalformedIdentifier: 3,
    HandlerError: 4,
}


def get_exit_code(exc: S3ProvError) -> int:
    for cls in exc.__class__.__mro__:
        if cls in EXIT_CODES:
            return EXIT_CODES[cls]  # type: ignore[index]
    return 1


__all__ = [
    "S3ProvError",
    "ConfigError",
    "MalformedIdentifier",
    "HandlerError",
    "EXIT_CODES",
    "get_exit_code",
]
