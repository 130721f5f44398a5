"""Schema parsing checks for Nuxeo metadata payloads."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from nuxeo_constants.adapters.nuxeo.schema import (
    AutomationRegistry,
    DocumentTypeRegistry,
    FacetList,
    FacetPayload,
    OperationPayload,
    SchemaList,
)


def test_automation_registry_parses_operations(nuxeo_payloads: dict[str, object]) -> None:
    registry = AutomationRegistry.model_validate(nuxeo_payloads["operations"])

    ids = [operation.id for operation in registry.operations]
    assert ids == [
        "Document.Create",
        "Blob.Attach",
        "Document-Create",
        "Repository.Query",
        "Context.FetchDocument",
    ]
    create = registry.operations[0]
    assert create.aliases == ["Document.CreateDocument"]
    assert [param.name for param in create.params] == ["type", "name"]
    assert create.params[0].required
    assert registry.operations[3].aliases == []
    assert registry.operations[4].category is None


def test_document_type_references_are_reduced_to_names(
    nuxeo_payloads: dict[str, object],
) -> None:
    registry = DocumentTypeRegistry.model_validate(nuxeo_payloads["doctypes"])

    assert list(registry.doctypes) == ["File", "Folder", "Domain"]
    assert registry.doctypes["File"].schemas == ["common", "file", "dublincore"]
    assert registry.doctypes["Domain"].schemas == ["common", "dublincore", "domain"]
    assert registry.doctypes["Folder"].facets == ["Folderish"]


def test_schema_prefix_uses_wire_alias(nuxeo_payloads: dict[str, object]) -> None:
    schemas = SchemaList.model_validate(nuxeo_payloads["schemas"]).root

    assert [(schema.name, schema.prefix) for schema in schemas] == [
        ("dublincore", "dc"),
        ("file", "file"),
        ("common", None),
    ]


def test_facet_schemas_accept_objects_and_absence(nuxeo_payloads: dict[str, object]) -> None:
    facets = FacetList.model_validate(nuxeo_payloads["facets"]).root

    assert [facet.schemas for facet in facets] == [[], ["uid"], []]
    hidden = FacetPayload.model_validate({"name": "Hidden", "perDocumentQuery": True})
    assert hidden.per_document_query


def test_operation_requires_an_id() -> None:
    with pytest.raises(ValidationError):
        OperationPayload.model_validate({"label": "Nameless"})


def test_unmodeled_keys_are_logged_once(caplog: pytest.LogCaptureFixture) -> None:
    payload = {"id": "Document.Lock", "widgetHintForTests": "lock"}

    with caplog.at_level(logging.DEBUG, logger="nuxeo_constants.adapters.nuxeo.schema"):
        OperationPayload.model_validate(payload)
        OperationPayload.model_validate(payload)

    messages = [record.getMessage() for record in caplog.records]
    assert messages == ["Nuxeo OperationPayload: unmodeled keys: widgetHintForTests"]


def test_unmodeled_keys_are_logged_once_per_model(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="nuxeo_constants.adapters.nuxeo.schema"):
        OperationPayload.model_validate({"id": "Document.Lock", "sharedHintForTests": 1})
        FacetPayload.model_validate({"name": "Folderish", "sharedHintForTests": 1})
        FacetPayload.model_validate({"name": "Versionable", "sharedHintForTests": 1})

    messages = [record.getMessage() for record in caplog.records]
    assert messages == [
        "Nuxeo OperationPayload: unmodeled keys: sharedHintForTests",
        "Nuxeo FacetPayload: unmodeled keys: sharedHintForTests",
    ]
