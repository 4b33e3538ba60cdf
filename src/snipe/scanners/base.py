"""Scanner base class and registry.

A scanner walks one source tree and produces the test records of one kind.
Scanners own every language-specific detail; the index engine only relies
on the record shape and on the failure contract:

- a missing or unreadable root raises ``ScanError``
- a root without tests yields an empty list
- no two records share the same (name, location)
"""

from __future__ import annotations

import abc
import os
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

from snipe.core.errors import ScanError
from snipe.core.logging import get_logger

if TYPE_CHECKING:
    from snipe.config.models import ScanConfig
    from snipe.index.models import TestKind, TestRecord

PRUNABLE_DIRS = frozenset(
    {".git", ".hg", "__pycache__", ".venv", "venv", "node_modules", ".mypy_cache", ".tox"}
)

log = get_logger("scan")


def walk_files(root: Path) -> Iterator[Path]:
    """Yield files under ``root`` in a stable, sorted order.

    Raises:
        OSError: If ``root`` itself cannot be listed. Unreadable
            subdirectories are logged and skipped.
    """
    listed = False

    def _on_error(error: OSError) -> None:
        if not listed:
            raise error
        log.warning("scan.dir_skipped", path=error.filename, error=error.strerror)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        listed = True
        dirnames[:] = sorted(d for d in dirnames if d not in PRUNABLE_DIRS)
        base = Path(dirpath)
        for filename in sorted(filenames):
            yield base / filename


def dedupe_records(records: list[TestRecord]) -> list[TestRecord]:
    """Drop repeated (name, location) pairs, keeping first-seen order."""
    return list(dict.fromkeys(records))


class Scanner(abc.ABC):
    """Base class for test scanners."""

    kind: TestKind

    def __init__(self, config: ScanConfig) -> None:
        self.config = config

    @abc.abstractmethod
    def root_for(self) -> Path:
        """Configured scan root for this kind, as written in config."""

    @abc.abstractmethod
    def discover(self, scan_root: Path) -> list[TestRecord]:
        """Collect records below an existing ``scan_root``."""

    def scan(self, scan_root: Path | None = None) -> list[TestRecord]:
        """Scan ``scan_root`` (default: the configured root).

        Raises:
            ScanError: If the root does not exist or cannot be read, or a
                manifest is malformed.
        """
        root = scan_root if scan_root is not None else self.root_for()
        if not root.is_dir():
            raise ScanError.root_missing(str(self.kind), str(root))
        try:
            records = self.discover(root)
        except OSError as e:
            raise ScanError.root_unreadable(str(self.kind), str(root), e.strerror or str(e)) from e
        return dedupe_records(records)


class ScannerRegistry:
    """Registry of scanner classes keyed by test kind."""

    def __init__(self) -> None:
        self._scanners: dict[TestKind, type[Scanner]] = {}

    def register(self, scanner_class: type[Scanner]) -> type[Scanner]:
        self._scanners[scanner_class.kind] = scanner_class
        return scanner_class

    def get(self, kind: TestKind) -> type[Scanner] | None:
        return self._scanners.get(kind)

    def create(self, kind: TestKind, config: ScanConfig) -> Scanner:
        scanner_class = self.get(kind)
        if scanner_class is None:
            raise KeyError(f"No scanner registered for {kind}")
        return scanner_class(config)


scanner_registry = ScannerRegistry()
