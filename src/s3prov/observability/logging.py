"""Structured logging for handler operations."""

import json
import logging
import re
import time
from contextlib import contextmanager
from typing import Any, Dict, Optional

logger = logging.getLogger("s3prov")
logger.setLevel(logging.INFO)

# Prevent duplicate handlers
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


class S3ProvLogger:
    """JSON logger that redacts AWS credentials from messages and context."""

    def __init__(self, name: str = "s3prov", verbose: bool = False):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG if verbose else logging.INFO)

        # Quoted patterns first so the unquoted ones do not eat the quotes
        self.secret_patterns = [
            r'(?i)(aws[_-]?secret[_-]?access[_-]?key|secret[_-]?key|session[_-]?token|password)\s*[=:]\s*"([^"]+)"',
            r'(?i)(aws[_-]?secret[_-]?access[_-]?key|secret[_-]?key|session[_-]?token|password)\s*[=:]\s*([^\s]+)',
            r'(?i)(aws[_-]?access[_-]?key[_-]?id|access[_-]?key)\s*[=:]\s*"?([^\s"]+)"?',
            r'\b(AKIA|ASIA)[0-9A-Z]{16}\b',
        ]

        self.secret_keys = [
            'secret', 'password', 'token', 'access_key', 'credentials',
        ]

    def _is_secret(self, text: str) -> bool:
        return any(re.search(pattern, text) for pattern in self.secret_patterns)

    def _redact_secrets(self, message: str) -> str:
        if self._is_secret(message):
            return "[REDACTED: Contains secrets]"
        return message

    def _redact_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        redacted: Dict[str, Any] = {}
        for key, value in data.items():
            if isinstance(value, str):
                if any(secret_key in key.lower() for secret_key in self.secret_keys) or self._is_secret(value):
                    redacted[key] = "[REDACTED]"
                else:
                    redacted[key] = value
            elif isinstance(value, dict):
                redacted[key] = self._redact_dict(value)
            elif isinstance(value, list):
                redacted[key] = [
                    "[REDACTED]" if isinstance(item, str) and self._is_secret(item) else item
                    for item in value
                ]
            else:
                redacted[key] = value
        return redacted

    def _log_structured(self, level: int, message: str, **kwargs: Any) -> None:
        log_entry: Dict[str, Any] = {
            "message": self._redact_secrets(message),
            "timestamp": time.time(),
            "level": logging.getLevelName(level),
        }
        if kwargs:
            log_entry["context"] = self._redact_dict(kwargs)
        self.logger.log(level, json.dumps(log_entry, default=str))

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log_structured(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log_structured(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log_structured(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log_structured(logging.ERROR, message, **kwargs)

    @contextmanager
    def operation(self, operation_name: str, **context: Any):
        """Log start, completion or failure of an operation with its duration."""
        start_time = time.time()
        self.debug(f"Starting {operation_name}", operation=operation_name, **context)

        try:
            yield self
        except Exception as e:
            duration = time.time() - start_time
            self.error(
                f"Operation {operation_name} failed",
                operation=operation_name,
                error=str(e),
                duration_ms=duration * 1000,
                **context
            )
            raise
        else:
            duration = time.time() - start_time
            self.info(
                f"Completed {operation_name}",
                operation=operation_name,
                duration_ms=duration * 1000,
                **context
            )

    def config_fingerprint(self, config: Dict[str, Any]) -> None:
        self.debug("Configuration loaded", config_fingerprint=self._redact_dict(config))


_loggers: Dict[str, S3ProvLogger] = {}
_verbose = False


def get_logger(name: str = "s3prov", verbose: Optional[bool] = None) -> S3ProvLogger:
    """Return the structured logger for ``name``, creating it on first use."""
    if name not in _loggers:
        _loggers[name] = S3ProvLogger(name, _verbose if verbose is None else verbose)
    return _loggers[name]


def set_verbose(verbose: bool) -> None:
    global _verbose
    _verbose = verbose
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)
    for structured in _loggers.values():
        structured.logger.setLevel(level)


def log_config_fingerprint(config: Dict[str, Any]) -> None:
    get_logger().config_fingerprint(config)
