"""Pydantic models describing the JSON documents exchanged with the front-end.

Field names are camelCase on the wire and snake_case in Python; both spellings
are accepted on input.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Self
from uuid import UUID  # noqa: TC003

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from metaevo.domain.model import DEFAULT_ATTRIBUTE_TYPE, DEFAULT_LOWER_BOUND, DEFAULT_UPPER_BOUND


class DocumentModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, alias_generator=to_camel)


def _wrap_bare_list(value: object, key: str) -> object:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return {key: list(value)}
    return value


# Metamodel ------------------------------------------------------------------


class AttributeDocument(DocumentModel):
    name: str
    type: str = DEFAULT_ATTRIBUTE_TYPE
    lower_bound: int = DEFAULT_LOWER_BOUND
    upper_bound: int = DEFAULT_UPPER_BOUND


class ReferenceDocument(DocumentModel):
    """``type`` names the target class."""

    name: str
    type: str
    containment: bool = False
    lower_bound: int = DEFAULT_LOWER_BOUND
    upper_bound: int = DEFAULT_UPPER_BOUND


class ClassDocument(DocumentModel):
    name: str
    abstract: bool = False
    interface: bool = False
    super_types: list[str] = Field(default_factory=list[str])
    attributes: list[AttributeDocument] = Field(default_factory=list["AttributeDocument"])
    references: list[ReferenceDocument] = Field(default_factory=list["ReferenceDocument"])


class MetamodelDocument(DocumentModel):
    name: str
    ns_uri: str | None = Field(
        default=None,
        validation_alias=AliasChoices("nsURI", "nsUri", "ns_uri"),
        serialization_alias="nsURI",
    )
    ns_prefix: str | None = None
    classes: list[ClassDocument] = Field(default_factory=list["ClassDocument"])


# Change batches -------------------------------------------------------------


class ChangeDocument(DocumentModel):
    change_type: str = Field(validation_alias=AliasChoices("changeType", "change_type", "type"))
    element_kind: str = Field(
        validation_alias=AliasChoices("elementKind", "element_kind", "element")
    )
    details: dict[str, object] = Field(default_factory=dict[str, object])


class ChangeBatchDocument(DocumentModel):
    changes: list[ChangeDocument] = Field(default_factory=list["ChangeDocument"])

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_list(cls, value: object) -> object:
        return _wrap_bare_list(value, "changes")


class ResolutionDocument(DocumentModel):
    """Resolution for one operation, addressed by id or by position in the batch."""

    operation_id: UUID | None = None
    change_index: int | None = None
    resolution: dict[str, object] = Field(default_factory=dict[str, object])

    @model_validator(mode="after")
    def _require_one_handle(self) -> Self:
        if (self.operation_id is None) == (self.change_index is None):
            raise ValueError("Exactly one of operationId or changeIndex is required")
        return self


class ResolutionBatchDocument(DocumentModel):
    resolutions: list[ResolutionDocument] = Field(default_factory=list["ResolutionDocument"])

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_list(cls, value: object) -> object:
        return _wrap_bare_list(value, "resolutions")


# Reports --------------------------------------------------------------------


class OperationSummaryDocument(DocumentModel):
    operation_id: UUID
    change_type: str
    element_kind: str
    details: Mapping[str, object]
    state: str
    ambiguity_reason: str | None = None
    failure_detail: str | None = None


class ReportDocument(DocumentModel):
    total_operations: int
    pending_count: int
    ambiguous_count: int
    applied_count: int
    failed_count: int
    operations: list[OperationSummaryDocument] = Field(
        default_factory=list["OperationSummaryDocument"]
    )
