"""On-disk format of a persisted index.

Records are flattened: the ``kind`` tag selects which locator fields are
present. Validation failures here are what makes a cache file "corrupt".
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from snipe.index.models import (
    CompiledLocation,
    ScriptedLocation,
    TestIndex,
    TestKind,
    TestRecord,
)


class CompiledRecordModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    kind: Literal["compiled"] = "compiled"
    build_target: str
    source_file: str


class ScriptedRecordModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    kind: Literal["scripted"] = "scripted"
    module_path: str
    container_name: str


RecordModel = Annotated[CompiledRecordModel | ScriptedRecordModel, Field(discriminator="kind")]


class IndexFileModel(BaseModel):
    """Top-level document of ``cc.json`` / ``py.json``."""

    scan_root: str
    generated_at: str
    records: list[RecordModel] = Field(default_factory=list)


def record_to_model(record: TestRecord) -> CompiledRecordModel | ScriptedRecordModel:
    loc = record.location
    if isinstance(loc, CompiledLocation):
        return CompiledRecordModel(
            name=record.name, build_target=loc.build_target, source_file=loc.source_file
        )
    return ScriptedRecordModel(
        name=record.name, module_path=loc.module_path, container_name=loc.container_name
    )


def model_to_record(model: CompiledRecordModel | ScriptedRecordModel) -> TestRecord:
    if isinstance(model, CompiledRecordModel):
        return TestRecord(model.name, CompiledLocation(model.build_target, model.source_file))
    return TestRecord(model.name, ScriptedLocation(model.module_path, model.container_name))


def index_to_model(index: TestIndex) -> IndexFileModel:
    return IndexFileModel(
        scan_root=index.scan_root,
        generated_at=index.generated_at,
        records=[record_to_model(r) for r in index.records],
    )


def model_to_index(kind: TestKind, model: IndexFileModel) -> TestIndex:
    """Convert a parsed document into an index.

    Raises:
        ValueError: If a record's kind does not match ``kind``.
    """
    records = [model_to_record(m) for m in model.records]
    for record in records:
        if record.kind is not kind:
            raise ValueError(f"{record.kind} record '{record.name}' found in {kind} index")
    return TestIndex(
        kind=kind,
        scan_root=model.scan_root,
        generated_at=model.generated_at,
        records=records,
    )
