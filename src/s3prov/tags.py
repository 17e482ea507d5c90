"""Key/value tag sets and the provider-level ignore rules."""

from __future__ import annotations

from typing import Dict, Iterator, Mapping, Optional

from .config.models import IgnoreTagsConfig

AWS_TAG_PREFIX = "aws:"


class KeyValueTags(Mapping[str, str]):
    """Immutable tag set; the filtering helpers return new instances."""

    def __init__(self, tags: Optional[Mapping[str, str]] = None) -> None:
        self._tags: Dict[str, str] = dict(tags or {})

    def __getitem__(self, key: str) -> str:
        return self._tags[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __repr__(self) -> str:
        return f"KeyValueTags({self._tags!r})"

    def ignore_aws(self) -> "KeyValueTags":
        """Drop keys reserved by AWS (``aws:`` prefix)."""
        return KeyValueTags({k: v for k, v in self._tags.items() if not k.startswith(AWS_TAG_PREFIX)})

    def ignore_config(self, config: Optional[IgnoreTagsConfig]) -> "KeyValueTags":
        if config is None:
            return self
        keys = set(config.keys)
        prefixes = tuple(config.key_prefixes)
        return KeyValueTags(
            {
                k: v
                for k, v in self._tags.items()
                if k not in keys and not (prefixes and k.startswith(prefixes))
            }
        )

    def to_dict(self) -> Dict[str, str]:
        return dict(self._tags)


__all__ = ["AWS_TAG_PREFIX", "KeyValueTags"]
