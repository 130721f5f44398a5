"""Translate Nuxeo payloads into raw metadata records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nuxeo_constants.domain.types import RawRecord

if TYPE_CHECKING:
    from .schema import DocumentTypePayload, FacetPayload, OperationPayload, SchemaPayload


def translate_operation(operation: OperationPayload) -> RawRecord:
    return RawRecord(
        key=operation.id,
        label=_text(operation.label),
        description=_text(operation.description),
        category=_text(operation.category),
        alias_keys=_unique(operation.aliases),
    )


def translate_document_type(name: str, document_type: DocumentTypePayload) -> RawRecord:
    return RawRecord(
        key=name,
        label=_text(document_type.label),
        description=_text(document_type.description),
        parent=_text(document_type.parent),
        facets=_unique(document_type.facets),
        schemas=_unique(document_type.schemas),
    )


def translate_schema(schema: SchemaPayload) -> RawRecord:
    return RawRecord(
        key=schema.name,
        description=_text(schema.description),
        prefix=_text(schema.prefix),
    )


def translate_facet(facet: FacetPayload) -> RawRecord:
    return RawRecord(
        key=facet.name,
        description=_text(facet.description),
        schemas=_unique(facet.schemas),
    )


def _text(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _unique(values: list[str]) -> tuple[str, ...]:
    # dict.fromkeys keeps first occurrences in source order
    return tuple(dict.fromkeys(value for value in values if value))
