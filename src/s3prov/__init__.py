"""S3 provisioning handlers.

Namespaces:
- core: resource identifiers, errors, retries
- config: provider configuration
- resources: resource handlers and data sources
- observability: logging, counters, tracing
"""

__all__ = [
    "core",
    "config",
    "resources",
    "observability",
]
