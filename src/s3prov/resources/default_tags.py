"""``default_tags`` data source: the provider's default tags as configured."""

from __future__ import annotations

from typing import ClassVar

from ..client import ProviderClient
from ..observability.tracing import trace_operation
from .base import ResourceData


class DefaultTagsDataSource:
    resource_type: ClassVar[str] = "default_tags"

    def __init__(self, client: ProviderClient) -> None:
        self.client = client

    @trace_operation("default_tags.read")
    def read(self) -> ResourceData:
        data = ResourceData(id=self.client.partition)
        default_tags = self.client.default_tags
        if default_tags is not None:
            data.set("tags", default_tags.ignore_aws().ignore_config(self.client.ignore_tags).to_dict())
        else:
            data.set("tags", None)
        return data


__all__ = ["DefaultTagsDataSource"]
