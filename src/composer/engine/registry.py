"""Micro-frontend registry models.

The registry is loaded once at startup and never modified afterwards, so
both models are frozen and the downstream mapping is read-only.
"""

from types import MappingProxyType
from typing import Dict, Mapping, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from composer.engine.selectors import parse_selector


class MicroFrontendEntry(BaseModel):
    """One fragment to inject into the page.

    Attributes:
        name: Fragment name, unique within the registry
        mount_selector: Simple CSS selector of the element receiving the fragment
        remote_url: URL of the fragment's entry module
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str = Field(..., min_length=1, description="Fragment name")
    mount_selector: str = Field(
        ...,
        alias="mountSelector",
        min_length=1,
        description="Selector of the mount element",
    )
    remote_url: str = Field(
        ..., alias="remoteUrl", min_length=1, description="Fragment entry URL"
    )

    @field_validator("mount_selector")
    @classmethod
    def _validate_selector(cls, value: str) -> str:
        parse_selector(value)
        return value


class Registry(BaseModel):
    """Loaded set of micro-frontends plus template location.

    Attributes:
        entries: Fragments in injection order
        template_bucket: Bucket holding the page template
        template_key: Object key of the page template
        downstream: Alias -> opaque downstream resource identifier
    """

    model_config = ConfigDict(frozen=True)

    entries: Tuple[MicroFrontendEntry, ...] = ()
    template_bucket: str = Field(..., min_length=1)
    template_key: str = Field(..., min_length=1)
    downstream: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("downstream")
    @classmethod
    def _freeze_downstream(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_serializer("downstream")
    def _serialize_downstream(self, value: Mapping[str, str]) -> Dict[str, str]:
        return dict(value)

    @model_validator(mode="after")
    def _check_unique_names(self) -> "Registry":
        seen = set()
        duplicates = []
        for entry in self.entries:
            if entry.name in seen:
                duplicates.append(entry.name)
            seen.add(entry.name)
        if duplicates:
            raise ValueError(
                f"Duplicate micro-frontend names: {', '.join(sorted(set(duplicates)))}"
            )
        return self

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(entry.name for entry in self.entries)
