"""
Domain records and the typed decoding of Cloud Controller documents.

The v2 API wraps every entity as ``{"metadata": {...}, "entity": {...}}`` and
every collection as ``{"resources": [...], "next_url": ...}``. Only the fields
the scan consumes are modelled; anything else in a document is ignored.
"""

from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, Field, ValidationError

from buildpack_usage.errors import TransportError


@dataclass(frozen=True, slots=True)
class Buildpack:
    guid: str
    name: str


@dataclass(frozen=True, slots=True)
class OrgSpaceInfo:
    org_name: str
    space_name: str


@dataclass(frozen=True, slots=True)
class AppLocator:
    """One report row: where an application lives and what it is called."""

    org_name: str
    space_name: str
    app_name: str

    @classmethod
    def for_app(cls, info: OrgSpaceInfo, app_name: str) -> "AppLocator":
        return cls(org_name=info.org_name, space_name=info.space_name, app_name=app_name)


class ResourceMetadata(BaseModel):
    guid: str


class NamedEntity(BaseModel):
    name: str = Field(min_length=1)


class BuildpackResource(BaseModel):
    metadata: ResourceMetadata
    entity: NamedEntity

    def to_buildpack(self) -> Buildpack:
        return Buildpack(guid=self.metadata.guid, name=self.entity.name)


class BuildpackPage(BaseModel):
    resources: list[BuildpackResource]
    next_url: str | None = None


class AppEntity(BaseModel):
    """Application fields used for matching.

    ``buildpack`` is the buildpack the user declared; ``detected_buildpack_guid``
    is only set once staging has detected one.
    """

    name: str
    space_url: str
    detected_buildpack_guid: str | None = None
    buildpack: str | None = None


class AppResource(BaseModel):
    entity: AppEntity


class AppPage(BaseModel):
    resources: list[AppResource]
    next_url: str | None = None


class SpaceEntity(BaseModel):
    name: str = Field(min_length=1)
    organization_url: str


class SpaceResource(BaseModel):
    entity: SpaceEntity


class OrganizationResource(BaseModel):
    entity: NamedEntity


DocumentT = TypeVar("DocumentT", bound=BaseModel)


def decode(model: type[DocumentT], document: dict[str, Any], source: str) -> DocumentT:
    """Validate a fetched JSON object, turning shape errors into TransportError."""
    try:
        return model.model_validate(document)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
            for error in exc.errors()
        )
        raise TransportError(
            f"Unexpected {model.__name__} document from {source}: {problems}"
        ) from exc
