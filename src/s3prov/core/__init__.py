"""Core pieces shared by the resource handlers: identifiers, errors, retries."""

from . import errors as errors
from . import ids as ids
from .errors import *  # noqa: F401,F403
from .ids import *  # noqa: F401,F403

combined = list(dict.fromkeys(list(ids.__all__) + list(errors.__all__)))
__all__ = tuple(combined)
