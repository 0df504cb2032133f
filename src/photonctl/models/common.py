from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field


class PhotonModel(BaseModel):
    """Base model with permissive extra handling for upstream compatibility."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Entity(PhotonModel):
    id: str | None = None
    kind: str | None = None


T = TypeVar("T")


class ResourceList(PhotonModel, Generic[T]):
    """A page of resources; ``nextPageLink`` is set while more pages remain."""

    items: list[T] = Field(default_factory=list)
    nextPageLink: str | None = None
    previousPageLink: str | None = None

    def __len__(self) -> int:
        return len(self.items)
