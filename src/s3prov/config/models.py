from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _tag_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class DefaultTagsConfig(BaseModel):
    tags: Dict[str, str] = Field(default_factory=dict, description="Tags applied to every taggable resource")

    @field_validator("tags", mode="before")
    @classmethod
    def _tag_values_as_strings(cls, value: Any) -> Any:
        # YAML and env parsing turn values like 1234 or true into scalars
        if isinstance(value, dict):
            return {str(k): _tag_value(v) for k, v in value.items()}
        return value


class IgnoreTagsConfig(BaseModel):
    keys: List[str] = Field(default_factory=list)
    key_prefixes: List[str] = Field(default_factory=list)


class RetriesConfig(BaseModel):
    max_attempts: int = Field(default=5, ge=1)
    max_elapsed_s: float = Field(default=30.0, ge=0)


class ProviderConfig(BaseModel):
    region: str = "us-east-1"
    partition: Optional[str] = None
    endpoint_url: Optional[str] = None
    default_tags: Optional[DefaultTagsConfig] = None
    ignore_tags: Optional[IgnoreTagsConfig] = None
    retries: RetriesConfig = Field(default_factory=RetriesConfig)

    model_config = ConfigDict(extra="forbid")


__all__ = [
    "DefaultTagsConfig",
    "IgnoreTagsConfig",
    "RetriesConfig",
    "ProviderConfig",
]
