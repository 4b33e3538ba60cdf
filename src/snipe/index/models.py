"""Test index core models.

A record names one discovered test and where it lives. The location is a
tagged variant: compiled tests live in a build target, scripted tests in
a class inside a module. Everything kind-specific beyond the shape of the
locator belongs to the scanners and the command renderer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

# =============================================================================
# Test Kinds
# =============================================================================


class TestKind(StrEnum):
    """Supported test categories. Values are the persisted ``kind`` tags."""

    __test__ = False

    COMPILED = "compiled"
    SCRIPTED = "scripted"

    @property
    def short_name(self) -> str:
        """CLI flag / index file stem: ``cc`` or ``py``."""
        return "cc" if self is TestKind.COMPILED else "py"

    @classmethod
    def from_short_name(cls, name: str) -> TestKind:
        for kind in cls:
            if kind.short_name == name:
                return kind
        raise ValueError(f"Unknown test kind: {name}")


# =============================================================================
# Locations
# =============================================================================


@dataclass(frozen=True, slots=True)
class CompiledLocation:
    """The buildable object containing a compiled unit test."""

    build_target: str
    source_file: str

    def __str__(self) -> str:
        return f"{self.build_target} ({self.source_file})"


@dataclass(frozen=True, slots=True)
class ScriptedLocation:
    """The module and enclosing class containing a scripted test method."""

    module_path: str
    container_name: str

    def __str__(self) -> str:
        return f"{self.module_path}::{self.container_name}"


Location = CompiledLocation | ScriptedLocation


# =============================================================================
# Records and Index
# =============================================================================


@dataclass(frozen=True, slots=True)
class TestRecord:
    """One discovered test.

    ``name`` is what the user types and is not unique within a kind.
    """

    __test__ = False

    name: str
    location: Location

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Test record name must not be empty")

    @property
    def kind(self) -> TestKind:
        if isinstance(self.location, CompiledLocation):
            return TestKind.COMPILED
        return TestKind.SCRIPTED

    def __str__(self) -> str:
        return f"{self.name} in {self.location}"


@dataclass
class TestIndex:
    """All records of one kind, in scan discovery order."""

    __test__ = False

    kind: TestKind
    scan_root: str = ""
    generated_at: str = ""
    records: list[TestRecord] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.records

    def matching(self, name: str) -> list[TestRecord]:
        """Records whose name equals ``name`` exactly, in discovery order."""
        return [record for record in self.records if record.name == name]


# =============================================================================
# Resolution Results
# =============================================================================


@dataclass(frozen=True, slots=True)
class NotFound:
    """No record carries the requested name, even after a rescan."""

    name: str


@dataclass(frozen=True, slots=True)
class Unique:
    """Exactly one record carries the requested name."""

    record: TestRecord


@dataclass(frozen=True, slots=True)
class Ambiguous:
    """Several records share the requested name; the caller must choose."""

    name: str
    records: tuple[TestRecord, ...]


ResolutionResult = NotFound | Unique | Ambiguous
