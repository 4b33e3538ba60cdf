"""Persisted test indexes, one JSON file per test kind.

The store is a plain value holding the index directory. Reading never
fails: a missing, unreadable or malformed file loads as an empty index
and the resolver rebuilds it. Writing is atomic: the new document is
written to a temporary file in the same directory and moved over the old
one with ``os.replace``.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path

from pydantic import ValidationError

from snipe.core.errors import PersistError
from snipe.core.logging import get_logger
from snipe.index.models import TestIndex, TestKind, TestRecord
from snipe.index.schema import IndexFileModel, index_to_model, model_to_index

log = get_logger("index.store")


def index_file_name(kind: TestKind) -> str:
    return f"{kind.short_name}.json"


def read_index(path: Path, kind: TestKind) -> TestIndex | None:
    """Parse the index at ``path``; None when missing or unusable."""
    if not path.exists():
        log.debug("index.load_missing", kind=str(kind), path=str(path))
        return None
    try:
        model = IndexFileModel.model_validate_json(path.read_bytes())
        return model_to_index(kind, model)
    except (OSError, ValidationError, ValueError) as e:
        log.warning("index.load_corrupt", kind=str(kind), path=str(path), error=str(e))
        return None


def write_index(path: Path, index: TestIndex) -> None:
    """Atomically replace ``path`` with ``index``.

    Raises:
        PersistError: If the directory or file cannot be written.
    """
    payload = index_to_model(index).model_dump_json(indent=2)
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(payload)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
        raise PersistError.write_failed(str(index.kind), str(path), str(e)) from e


class IndexStore:
    """Owns the on-disk index files under ``index_dir``."""

    def __init__(self, index_dir: Path) -> None:
        self._index_dir = index_dir

    @property
    def index_dir(self) -> Path:
        return self._index_dir

    def path_for(self, kind: TestKind) -> Path:
        return self._index_dir / index_file_name(kind)

    def load(self, kind: TestKind, scan_root: str | None = None) -> TestIndex:
        """Load the index for ``kind``, or an empty one if there is none.

        When ``scan_root`` is given, an index generated from a different
        root is discarded as well.
        """
        index = read_index(self.path_for(kind), kind)
        if index is None:
            return TestIndex(kind=kind)
        if scan_root is not None and index.scan_root != scan_root:
            log.info(
                "index.root_mismatch",
                kind=str(kind),
                indexed_root=index.scan_root,
                scan_root=scan_root,
            )
            return TestIndex(kind=kind)
        log.debug("index.loaded", kind=str(kind), records=len(index.records))
        return index

    def save(self, index: TestIndex) -> Path:
        """Persist ``index`` atomically and return the file written."""
        path = self.path_for(index.kind)
        write_index(path, index)
        log.info("index.saved", kind=str(index.kind), path=str(path), records=len(index.records))
        return path

    @staticmethod
    def contains(index: TestIndex, name: str) -> bool:
        """Exact, case-sensitive match against every record name."""
        return any(record.name == name for record in index.records)

    @staticmethod
    def names(index: TestIndex) -> list[str]:
        """Distinct test names in discovery order."""
        return list(dict.fromkeys(record.name for record in index.records))


def build_index(kind: TestKind, scan_root: str, records: list[TestRecord]) -> TestIndex:
    """Wrap freshly scanned records with their scan marker."""
    return TestIndex(
        kind=kind,
        scan_root=scan_root,
        generated_at=datetime.now(UTC).isoformat(timespec="seconds"),
        records=records,
    )
