"""Compiled unit test discovery.

Build manifests named ``manifest_name`` inside ``manifest_dir_name``
directories declare test targets; each target's sources are searched for
test-case macros such as ``FIXTURE_TEST(name, fixture)``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path

from snipe.core.errors import ScanError
from snipe.core.logging import get_logger
from snipe.index.models import CompiledLocation, TestKind, TestRecord
from snipe.scanners.base import Scanner, scanner_registry, walk_files
from snipe.scanners.cmake import CMakeParseError, RpTest, parse_manifest

log = get_logger("scan.compiled")


def _macro_pattern(macros: Iterable[str]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(m) for m in macros)
    return re.compile(
        rf"^[ \t]*(?:{alternatives})\s*\(\s*([A-Za-z_][A-Za-z0-9_]*)",
        re.MULTILINE,
    )


def find_test_cases(source: str, macros: Iterable[str]) -> list[str]:
    """Test names declared by ``macros`` in ``source``, in file order."""
    pattern = _macro_pattern(macros)
    return list(dict.fromkeys(m.group(1) for m in pattern.finditer(source)))


@scanner_registry.register
class CompiledTestScanner(Scanner):
    """Scanner for tests built into binaries by the build system."""

    kind = TestKind.COMPILED

    def root_for(self) -> Path:
        return Path(self.config.cc_test_root)

    def _is_manifest(self, path: Path) -> bool:
        return (
            path.name == self.config.manifest_name
            and path.parent.name == self.config.manifest_dir_name
        )

    def _read_targets(self, manifest: Path) -> list[RpTest]:
        try:
            text = manifest.read_text(encoding="utf-8")
            # Sources are joined onto the manifest directory below
            return parse_manifest(
                text,
                variables={"CMAKE_CURRENT_SOURCE_DIR": ".", "CMAKE_CURRENT_LIST_DIR": "."},
            )
        except (OSError, UnicodeDecodeError, CMakeParseError) as e:
            raise ScanError.parse_failed(str(self.kind), str(manifest), str(e)) from e

    def discover(self, scan_root: Path) -> list[TestRecord]:
        records: list[TestRecord] = []
        for manifest in walk_files(scan_root):
            if not self._is_manifest(manifest):
                continue
            targets = self._read_targets(manifest)
            log.debug("scan.manifest", path=str(manifest), targets=len(targets))

            for target in targets:
                for source in target.sources:
                    source_path = Path(source)
                    if not source_path.is_absolute():
                        source_path = manifest.parent / source_path
                    try:
                        text = source_path.read_text(encoding="utf-8", errors="replace")
                    except OSError as e:
                        log.warning(
                            "scan.source_missing",
                            target=target.build_target,
                            path=str(source_path),
                            error=str(e),
                        )
                        continue
                    names = find_test_cases(text, self.config.cc_test_macros)
                    log.debug("scan.source", path=str(source_path), tests=len(names))
                    records.extend(
                        TestRecord(name, CompiledLocation(target.build_target, str(source_path)))
                        for name in names
                    )

        log.info("scan.done", kind=str(self.kind), root=str(scan_root), records=len(records))
        return records
