"""Provider client shared by every handler.

Holds the S3 API client together with the provider-wide settings that
handlers need (partition, default and ignored tags, retry limits).
"""

from __future__ import annotations

from typing import Any, Optional

from .config.models import IgnoreTagsConfig, ProviderConfig
from .core.errors import ConfigError
from .tags import KeyValueTags


def partition_for_region(region: str) -> str:
    if region.startswith("cn-"):
        return "aws-cn"
    if region.startswith("us-gov-"):
        return "aws-us-gov"
    return "aws"


class ProviderClient:
    def __init__(self, config: Optional[ProviderConfig] = None, *, s3: Any = None) -> None:
        self.config = config or ProviderConfig()
        self.region = self.config.region
        self.partition = self.config.partition or partition_for_region(self.region)
        self._s3 = s3

    @property
    def default_tags(self) -> Optional[KeyValueTags]:
        if self.config.default_tags is None:
            return None
        return KeyValueTags(self.config.default_tags.tags)

    @property
    def ignore_tags(self) -> Optional[IgnoreTagsConfig]:
        return self.config.ignore_tags

    @property
    def retry_options(self) -> dict[str, Any]:
        return {
            "max_attempts": self.config.retries.max_attempts,
            "max_elapsed": self.config.retries.max_elapsed_s,
        }

    @property
    def s3(self) -> Any:
        if self._s3 is not None:
            return self._s3
        try:
            import boto3  # type: ignore
        except ImportError as e:  # pragma: no cover - import failure
            raise ConfigError("boto3 not installed. Install with: pip install boto3") from e
        self._s3 = boto3.client("s3", region_name=self.region, endpoint_url=self.config.endpoint_url)
        return self._s3


__all__ = ["ProviderClient", "partition_for_region"]
