from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, NoReturn, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..client import ProviderClient
from ..core.errors import ConfigError, HandlerError
from ..core.retry import RetryPredicate, error_code, retry_call
from ..observability.logging import S3ProvLogger, get_logger

M = TypeVar("M", bound=BaseModel)


def load_model(model_cls: Type[M], attributes: dict[str, Any]) -> M:
    """Validate a raw attribute map against a resource model."""
    try:
        return model_cls.model_validate(attributes)
    except ValidationError as e:
        raise ConfigError(f"Invalid {model_cls.__name__} attributes: {e}") from e


class ResourceData:
    """Attribute map for one resource during a single operation.

    - config: desired attributes from the declarative configuration
    - prior: attributes recorded in state before the operation
    - id: the durable resource id ("" once the resource is gone)

    Reads prefer the configuration and fall back to state; writes go to the
    new state only.
    """

    def __init__(
        self,
        config: Optional[dict[str, Any]] = None,
        *,
        prior: Optional[dict[str, Any]] = None,
        id: str = "",
        new_resource: bool = False,
    ) -> None:
        self._config = dict(config or {})
        self._prior = dict(prior or {})
        self._state = dict(self._prior)
        self.id = id
        self.new_resource = new_resource

    @classmethod
    def from_model(cls, model: BaseModel, **kwargs: Any) -> "ResourceData":
        return cls(model.model_dump(), **kwargs)

    def get(self, key: str, default: Any = None) -> Any:
        if self._config.get(key) is not None:
            return self._config[key]
        return self._state.get(key, default)

    def get_ok(self, key: str) -> tuple[Any, bool]:
        value = self.get(key)
        return value, bool(value)

    def set(self, key: str, value: Any) -> None:
        self._state[key] = value

    def has_change(self, key: str) -> bool:
        if key not in self._config:
            return False
        return self._config.get(key) != self._prior.get(key)

    def config_value(self, key: str) -> Any:
        return self._config.get(key)

    def prior_value(self, key: str) -> Any:
        return self._prior.get(key)

    @property
    def state(self) -> dict[str, Any]:
        return {"id": self.id, **self._state}


class BaseHandler(ABC):
    """Base class for resource handlers.

    Subclasses map the attribute map onto API calls for one resource type.
    Remote failures are raised as :class:`HandlerError`.
    """

    resource_type: ClassVar[str]

    def __init__(self, client: ProviderClient, *, sleep: Callable[[float], None] = time.sleep) -> None:
        self.client = client
        self.sleep = sleep

    @property
    def log(self) -> S3ProvLogger:
        return get_logger(f"s3prov.{self.resource_type}")

    def call(self, func: Callable[..., Any], params: dict[str, Any], *, should_retry: Optional[RetryPredicate] = None) -> Any:
        return retry_call(func, kwargs=params, should_retry=should_retry, sleep=self.sleep, **self.client.retry_options)

    def raise_error(self, message: str, exc: Optional[BaseException] = None) -> NoReturn:
        if exc is None:
            raise HandlerError(message)
        raise HandlerError(f"{message}: {exc}", code=error_code(exc)) from exc

    @abstractmethod
    def create(self, data: ResourceData) -> ResourceData:
        """Create the remote object, set the id and return the refreshed data."""

    @abstractmethod
    def read(self, data: ResourceData) -> Optional[ResourceData]:
        """Refresh ``data`` from the remote object; ``None`` if it no longer exists."""

    @abstractmethod
    def update(self, data: ResourceData) -> ResourceData:
        """Apply changed attributes and return the refreshed data."""

    @abstractmethod
    def delete(self, data: ResourceData) -> None:
        """Remove the remote object."""

    def import_state(self, raw_id: str) -> ResourceData:
        """Start tracking an existing object by id; read it afterwards to fill attributes."""
        return ResourceData(id=raw_id)


__all__ = ["BaseHandler", "ResourceData", "load_model"]
