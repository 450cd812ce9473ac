"""Pydantic models for extracted page resources and detected libraries."""

from __future__ import annotations

from typing import Literal

import pydantic

ResourceType = Literal["script", "style"]
OriginType = Literal["first", "third"]


def snake_to_camel(name: str) -> str:
    """Convert a snake_case field name to its camelCase JSON alias."""
    head, *rest = name.split("_")
    return head + "".join(w.capitalize() for w in rest)


class CamelModel(pydantic.BaseModel):
    """Base model serialised with camelCase keys."""

    model_config = pydantic.ConfigDict(
        alias_generator=snake_to_camel, populate_by_name=True
    )


class ResourceItem(CamelModel):
    """A script or stylesheet referenced by the page."""

    model_config = pydantic.ConfigDict(frozen=True)

    url: str
    type: ResourceType
    origin: OriginType
    blocking: bool
    size_bytes: int | None = pydantic.Field(default=None, ge=0)

    @property
    def is_third_party(self) -> bool:
        return self.origin == "third"

    @property
    def is_blocking_script(self) -> bool:
        return self.type == "script" and self.blocking


class LibraryItem(CamelModel):
    """A library name/version guessed from a resource URL."""

    name: str
    version: str | None = None
    url: str
    domain: str
    type: ResourceType
