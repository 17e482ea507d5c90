"""Retries for S3 API calls.

Transient S3 failures (throttling, 5xx, request timeouts) are retried with
decorrelated jitter; callers can widen the set of retried error codes with
:func:`retry_on_codes`, e.g. ``NoSuchBucket`` right after a bucket was created.
"""

from __future__ import annotations

import random
import time
from typing import Any, Callable, Optional

from ..observability import metrics
from ..observability.logging import get_logger

RetryPredicate = Callable[[BaseException], bool]

TRANSIENT_ERROR_CODES = frozenset(
    {
        "InternalError",
        "RequestTimeout",
        "RequestLimitExceeded",
        "ServiceUnavailable",
        "SlowDown",
        "Throttling",
        "ThrottlingException",
    }
)


def _call_label(func: Callable[..., Any]) -> str:
    name = getattr(func, "__name__", "")
    if name:
        return name
    cls = getattr(func, "__class__", None)
    if cls and getattr(cls, "__name__", None):
        return cls.__name__
    return "call"


def _count(suffix: str, label: str, *, value: float = 1.0) -> None:
    metrics.inc(f"retry.{suffix}", value)
    metrics.inc(f"retry.{suffix}.{label}", value)


def error_code(exc: BaseException) -> Optional[str]:
    """Return the service error code of a botocore ``ClientError``-like exception."""

    response = getattr(exc, "response", None)
    if isinstance(response, dict):
        code = (response.get("Error") or {}).get("Code")
        if code:
            return str(code)
    return getattr(exc, "code", None)


def http_status(exc: BaseException) -> Optional[int]:
    status = getattr(exc, "status_code", None)
    if status is None:
        response = getattr(exc, "response", None)
        if isinstance(response, dict):
            status = response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return status if isinstance(status, int) else None


def default_predicate(exc: BaseException) -> bool:
    if error_code(exc) in TRANSIENT_ERROR_CODES:
        return True
    status = http_status(exc)
    return status == 429 or (status is not None and 500 <= status < 600)


def retry_on_codes(*codes: str) -> RetryPredicate:
    """Retry when the error code is one of ``codes`` or the failure is transient."""

    wanted = set(codes)

    def _predicate(exc: BaseException) -> bool:
        return error_code(exc) in wanted or default_predicate(exc)

    return _predicate


def _next_delay(previous: float, base_delay: float, max_delay: float) -> float:
    return min(max_delay, random.uniform(base_delay, max(base_delay, previous * 3)))


def retry_call(
    func: Callable[..., Any],
    *,
    args: tuple[Any, ...] = (),
    kwargs: Optional[dict[str, Any]] = None,
    should_retry: Optional[RetryPredicate] = None,
    max_attempts: int = 5,
    base_delay: float = 0.2,
    max_delay: float = 5.0,
    max_elapsed: float = 30.0,
    sleep: Callable[[float], None] = time.sleep,
    now: Callable[[], float] = time.monotonic,
) -> Any:
    """Call ``func`` until it succeeds, the error is not retryable, or a limit is hit.

    The last error is re-raised unchanged once attempts or elapsed time run out.
    """

    predicate = should_retry or default_predicate
    label = _call_label(func)
    call_kwargs = kwargs or {}
    start = now()
    delay = base_delay
    attempt = 0
    while True:
        attempt += 1
        try:
            result = func(*args, **call_kwargs)
        except Exception as exc:
            _count("attempts", label)
            delay = _next_delay(delay, base_delay, max_delay)
            elapsed = now() - start
            if not predicate(exc) or attempt >= max_attempts or elapsed + delay > max_elapsed:
                _count("failures", label)
                raise
            get_logger("s3prov.retry").debug(
                f"Retrying {label}",
                attempt=attempt,
                delay_s=delay,
                error_code=error_code(exc),
            )
            _count("sleep_seconds", label, value=delay)
            sleep(delay)
        else:
            _count("success", label)
            if attempt > 1:
                _count("success.after_retry", label)
            return result


__all__ = [
    "TRANSIENT_ERROR_CODES",
    "retry_call",
    "retry_on_codes",
    "default_predicate",
    "error_code",
    "http_status",
]
