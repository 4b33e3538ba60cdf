"""Test scanners.

Importing this package registers the compiled and scripted scanners.
"""

from snipe.scanners.base import Scanner, ScannerRegistry, scanner_registry
from snipe.scanners.compiled import CompiledTestScanner
from snipe.scanners.scripted import ScriptedTestScanner

__all__ = [
    "Scanner",
    "ScannerRegistry",
    "scanner_registry",
    "CompiledTestScanner",
    "ScriptedTestScanner",
]
