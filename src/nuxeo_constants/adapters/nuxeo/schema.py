"""Nuxeo metadata response schemas."""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

log = logging.getLogger(__name__)


class NuxeoBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    # (model name, key) pairs already reported
    _logged_extra_keys: ClassVar[set[tuple[str, str]]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        model = type(self).__name__
        new_keys = {key for key in extras if (model, key) not in self._logged_extra_keys}
        if not new_keys:
            return
        self._logged_extra_keys.update((model, key) for key in new_keys)
        log.debug(
            "Nuxeo %s: unmodeled keys: %s",
            model,
            ", ".join(sorted(new_keys)),
        )


def _reference_names(value: object) -> object:
    """Reduce schema/facet references to their names.

    Depending on the endpoint and server version a reference is either a bare
    name or an object carrying a ``name`` key.
    """

    if value is None:
        return []
    if not isinstance(value, list):
        return value
    names: list[object] = []
    for item in value:
        if isinstance(item, dict) and "name" in item:
            names.append(item["name"])
        else:
            names.append(item)
    return names


class OperationParam(NuxeoBaseModel):
    name: str
    type: str | None = None
    required: bool = False
    description: str | None = None
    values: list[str] = Field(default_factory=list)
    order: int | None = None


class OperationPayload(NuxeoBaseModel):
    id: str
    label: str | None = None
    category: str | None = None
    description: str | None = None
    aliases: list[str] = Field(default_factory=list)
    signature: list[str] = Field(default_factory=list)
    params: list[OperationParam] = Field(default_factory=list)
    requires: str | None = None
    since: str | None = None
    url: str | None = None

    @field_validator("aliases", "signature", mode="before")
    @classmethod
    def none_as_empty(cls, value: object) -> object:
        return [] if value is None else value


class AutomationRegistry(NuxeoBaseModel):
    """Payload of ``GET site/automation``."""

    operations: list[OperationPayload]


class DocumentTypePayload(NuxeoBaseModel):
    label: str | None = None
    description: str | None = None
    parent: str | None = None
    facets: list[str] = Field(default_factory=list)
    schemas: list[str] = Field(default_factory=list)
    subtypes: list[str] = Field(default_factory=list)

    @field_validator("facets", "schemas", "subtypes", mode="before")
    @classmethod
    def reference_names(cls, value: object) -> object:
        return _reference_names(value)


class DocumentTypeRegistry(NuxeoBaseModel):
    """Payload of ``GET api/v1/config/types``; document types are keyed by name."""

    doctypes: dict[str, DocumentTypePayload]


class SchemaPayload(NuxeoBaseModel):
    name: str
    prefix: str | None = Field(default=None, alias="@prefix")
    description: str | None = None
    fields: dict[str, object] = Field(default_factory=dict)


class SchemaList(RootModel[list[SchemaPayload]]):
    """Payload of ``GET api/v1/config/schemas``."""


class FacetPayload(NuxeoBaseModel):
    name: str
    description: str | None = None
    schemas: list[str] = Field(default_factory=list)
    per_document_query: bool = Field(default=False, alias="perDocumentQuery")

    @field_validator("schemas", mode="before")
    @classmethod
    def reference_names(cls, value: object) -> object:
        return _reference_names(value)


class FacetList(RootModel[list[FacetPayload]]):
    """Payload of ``GET api/v1/config/facets``."""
