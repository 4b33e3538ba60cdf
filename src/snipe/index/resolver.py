"""Test name resolution with rescan-on-miss.

The resolver looks a bare test name up in the persisted index for one
kind. The index is rebuilt from a full scan only when it is empty or the
name is absent, and at most once per lookup. Ambiguous names are returned
to the caller, never chosen here.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from snipe.core.errors import PersistError
from snipe.core.logging import get_logger
from snipe.index.models import Ambiguous, NotFound, ResolutionResult, TestIndex, TestKind, Unique
from snipe.index.store import IndexStore, build_index

if TYPE_CHECKING:
    from snipe.config.models import ScanConfig
    from snipe.scanners.base import Scanner

log = get_logger("index.resolver")

RescanHook = Callable[[TestKind, Path], None]


def scan_marker(scan_root: Path) -> str:
    """Absolute form of a scan root, as stored in ``scan_root``."""
    return str(scan_root.resolve())


class Resolver:
    """Resolve test names against an ``IndexStore``.

    Args:
        store: Where indexes are loaded from and saved to.
        scanners: One scanner per test kind.
        on_rescan: Called before a rescan starts (for user feedback).
    """

    def __init__(
        self,
        store: IndexStore,
        scanners: Mapping[TestKind, Scanner],
        *,
        on_rescan: RescanHook | None = None,
    ) -> None:
        self._store = store
        self._scanners = dict(scanners)
        self._on_rescan = on_rescan
        self.last_persist_error: PersistError | None = None

    @classmethod
    def from_config(
        cls,
        store: IndexStore,
        config: ScanConfig,
        *,
        on_rescan: RescanHook | None = None,
    ) -> Resolver:
        from snipe.scanners import scanner_registry

        scanners = {kind: scanner_registry.create(kind, config) for kind in TestKind}
        return cls(store, scanners, on_rescan=on_rescan)

    def _scanner(self, kind: TestKind) -> Scanner:
        return self._scanners[kind]

    def rescan(self, kind: TestKind) -> TestIndex:
        """Rebuild the index for ``kind`` from a full scan and persist it.

        A failed write is kept in ``last_persist_error``; the fresh index
        is returned either way.

        Raises:
            ScanError: If scanning fails. The persisted index is untouched.
        """
        scanner = self._scanner(kind)
        root = scanner.root_for()
        if self._on_rescan is not None:
            self._on_rescan(kind, root)
        log.info("resolver.rescan", kind=str(kind), root=str(root))

        records = scanner.scan(root)
        index = build_index(kind, scan_marker(root), records)
        try:
            self._store.save(index)
        except PersistError as e:
            log.error("resolver.persist_failed", kind=str(kind), error=str(e))
            self.last_persist_error = e
        return index

    def load(self, kind: TestKind) -> TestIndex:
        """Load the persisted index for ``kind`` without scanning."""
        root = self._scanner(kind).root_for()
        return self._store.load(kind, scan_root=scan_marker(root))

    def resolve(self, name: str, kind: TestKind) -> ResolutionResult:
        """Find every record named exactly ``name``.

        Raises:
            ScanError: If a rescan was needed and failed.
        """
        self.last_persist_error = None
        index = self.load(kind)
        if index.is_empty or not IndexStore.contains(index, name):
            log.debug("resolver.miss", kind=str(kind), name=name, cached=len(index.records))
            index = self.rescan(kind)

        matches = index.matching(name)
        log.debug("resolver.result", kind=str(kind), name=name, matches=len(matches))
        if not matches:
            return NotFound(name)
        if len(matches) == 1:
            return Unique(matches[0])
        return Ambiguous(name, tuple(matches))

    def candidates(self, prefix: str, kind: TestKind) -> list[str]:
        """Indexed names starting with ``prefix``. Never scans."""
        index = self.load(kind)
        return [n for n in IndexStore.names(index) if n.startswith(prefix)]
