from .loader import load_config, parse_set_overrides
from .models import DefaultTagsConfig, IgnoreTagsConfig, ProviderConfig, RetriesConfig

__all__ = [
    "load_config",
    "parse_set_overrides",
    "DefaultTagsConfig",
    "IgnoreTagsConfig",
    "ProviderConfig",
    "RetriesConfig",
]
