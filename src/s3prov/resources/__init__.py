"""Resource handlers and data sources, keyed by resource type."""

from .base import BaseHandler, ResourceData, load_model
from .bucket_acl import BucketAcl, BucketAclHandler
from .default_tags import DefaultTagsDataSource

HANDLERS = {
    BucketAclHandler.resource_type: BucketAclHandler,
}

DATA_SOURCES = {
    DefaultTagsDataSource.resource_type: DefaultTagsDataSource,
}

__all__ = [
    "BaseHandler",
    "ResourceData",
    "load_model",
    "BucketAcl",
    "BucketAclHandler",
    "DefaultTagsDataSource",
    "HANDLERS",
    "DATA_SOURCES",
]
