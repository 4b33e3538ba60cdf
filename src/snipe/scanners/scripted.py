"""Scripted test discovery.

Python test modules are parsed with ``ast`` (never imported). A method of a
top-level class is a test when it carries one of the configured decorator
calls, e.g. ``@cluster(num_nodes=3)`` or ``@mark.cluster(...)``.
"""

from __future__ import annotations

import ast
from collections.abc import Iterable
from pathlib import Path

from snipe.core.logging import get_logger
from snipe.index.models import ScriptedLocation, TestKind, TestRecord
from snipe.scanners.base import Scanner, scanner_registry, walk_files

log = get_logger("scan.scripted")


def _decorator_name(node: ast.expr) -> str | None:
    if not isinstance(node, ast.Call):
        return None
    target = node.func
    if isinstance(target, ast.Name):
        return target.id
    if isinstance(target, ast.Attribute):
        return target.attr
    return None


def _is_test_method(node: ast.stmt, decorators: frozenset[str]) -> bool:
    if not isinstance(node, ast.FunctionDef | ast.AsyncFunctionDef):
        return False
    return any(_decorator_name(d) in decorators for d in node.decorator_list)


def find_tests_in_source(
    source: str, decorators: Iterable[str], filename: str = "<unknown>"
) -> list[tuple[str, str]]:
    """Return ``(class_name, method_name)`` pairs in source order.

    Raises:
        SyntaxError: If ``source`` is not valid Python.
    """
    wanted = frozenset(decorators)
    tree = ast.parse(source, filename=filename)
    found: list[tuple[str, str]] = []
    for node in tree.body:
        if not isinstance(node, ast.ClassDef):
            continue
        for item in node.body:
            if _is_test_method(item, wanted):
                found.append((node.name, item.name))  # type: ignore[attr-defined]
    return found


@scanner_registry.register
class ScriptedTestScanner(Scanner):
    """Scanner for decorator-marked test methods in Python modules."""

    kind = TestKind.SCRIPTED

    def root_for(self) -> Path:
        return Path(self.config.py_test_root)

    def discover(self, scan_root: Path) -> list[TestRecord]:
        records: list[TestRecord] = []
        for path in walk_files(scan_root):
            if path.suffix != ".py":
                continue
            try:
                source = path.read_text(encoding="utf-8")
                tests = find_tests_in_source(source, self.config.py_test_decorators, str(path))
            except (OSError, UnicodeDecodeError, SyntaxError, ValueError) as e:
                log.warning("scan.file_skipped", path=str(path), error=str(e))
                continue
            records.extend(
                TestRecord(method, ScriptedLocation(str(path), class_name))
                for class_name, method in tests
            )

        log.info("scan.done", kind=str(self.kind), root=str(scan_root), records=len(records))
        return records
