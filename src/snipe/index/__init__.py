"""Test index: records, persistence and name resolution."""

from snipe.index.models import (
    Ambiguous,
    CompiledLocation,
    NotFound,
    ResolutionResult,
    ScriptedLocation,
    TestIndex,
    TestKind,
    TestRecord,
    Unique,
)
from snipe.index.resolver import Resolver
from snipe.index.store import IndexStore

__all__ = [
    "Ambiguous",
    "CompiledLocation",
    "IndexStore",
    "NotFound",
    "ResolutionResult",
    "Resolver",
    "ScriptedLocation",
    "TestIndex",
    "TestKind",
    "TestRecord",
    "Unique",
]
