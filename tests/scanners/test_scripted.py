"""Tests for scripted test discovery."""

import textwrap
from pathlib import Path

import pytest

from snipe.config.models import ScanConfig
from snipe.core.errors import ScanError
from snipe.index.models import ScriptedLocation, TestKind, TestRecord
from snipe.scanners import scanner_registry
from snipe.scanners.scripted import ScriptedTestScanner, find_tests_in_source


def _source(text: str) -> str:
    return textwrap.dedent(text).lstrip()


class TestFindTestsInSource:
    """Decorator matching on parsed modules."""

    def test_given_cluster_decorated_methods_then_found_in_order(self) -> None:
        source = _source(
            """
            class TopicTest(RedpandaTest):
                @cluster(num_nodes=3)
                def test_create(self):
                    pass

                @cluster(num_nodes=1)
                @matrix(replicas=[1, 3])
                def test_delete(self, replicas):
                    pass

                def setUp(self):
                    pass
            """
        )

        assert find_tests_in_source(source, ["cluster"]) == [
            ("TopicTest", "test_create"),
            ("TopicTest", "test_delete"),
        ]

    def test_attribute_and_async_decorator_calls_match(self) -> None:
        source = _source(
            """
            class A:
                @mark.cluster(num_nodes=1)
                def test_attr(self):
                    pass

                @cluster()
                async def test_async(self):
                    pass
            """
        )

        assert find_tests_in_source(source, ["cluster"]) == [
            ("A", "test_attr"),
            ("A", "test_async"),
        ]

    def test_given_decorator_without_call_then_not_a_test(self) -> None:
        source = _source(
            """
            class A:
                @cluster
                def test_bare(self):
                    pass

                @mark.cluster
                def test_bare_attr(self):
                    pass
            """
        )

        assert find_tests_in_source(source, ["cluster"]) == []

    def test_nested_classes_and_module_functions_are_ignored(self) -> None:
        source = _source(
            """
            @cluster(num_nodes=1)
            def test_module_level():
                pass

            class Outer:
                class Inner:
                    @cluster(num_nodes=1)
                    def test_inner(self):
                        pass
            """
        )

        assert find_tests_in_source(source, ["cluster"]) == []

    def test_other_decorators_are_ignored(self) -> None:
        source = _source(
            """
            class A:
                @ignore
                def test_ignored(self):
                    pass
            """
        )

        assert find_tests_in_source(source, ["cluster"]) == []

    def test_invalid_source_raises_syntax_error(self) -> None:
        with pytest.raises(SyntaxError):
            find_tests_in_source("class A(:\n", ["cluster"])


class TestScriptedTestScanner:
    """Scanning a tree of Python test modules."""

    def test_is_registered_for_scripted_kind(self) -> None:
        assert scanner_registry.get(TestKind.SCRIPTED) is ScriptedTestScanner

    def test_given_sample_tree_then_records(self, in_repo: Path) -> None:
        records = ScriptedTestScanner(ScanConfig()).scan()

        assert records == [
            TestRecord(
                "test_basic_assignment",
                ScriptedLocation("tests/rptest/basic_test.py", "BasicAssignmentTest"),
            )
        ]

    def test_given_same_name_in_two_classes_then_both_reported(self, tmp_path: Path) -> None:
        (tmp_path / "a_test.py").write_text(
            "class ATest:\n    @cluster(num_nodes=1)\n    def test_dup(self):\n        pass\n"
        )
        (tmp_path / "b_test.py").write_text(
            "class BTest:\n    @cluster(num_nodes=1)\n    def test_dup(self):\n        pass\n"
        )

        records = ScriptedTestScanner(ScanConfig()).scan(tmp_path)

        assert [r.location.container_name for r in records] == ["ATest", "BTest"]

    def test_given_unparsable_module_then_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "broken_test.py").write_text("class Broken(:\n")
        (tmp_path / "ok_test.py").write_text(
            "class OkTest:\n    @cluster(num_nodes=1)\n    def test_ok(self):\n        pass\n"
        )

        records = ScriptedTestScanner(ScanConfig()).scan(tmp_path)

        assert [r.name for r in records] == ["test_ok"]

    def test_non_python_and_cache_dirs_are_skipped(self, tmp_path: Path) -> None:
        body = "class T:\n    @cluster(num_nodes=1)\n    def test_t(self):\n        pass\n"
        (tmp_path / "notes.txt").write_text(body)
        (tmp_path / "__pycache__").mkdir()
        (tmp_path / "__pycache__" / "t.py").write_text(body)

        assert ScriptedTestScanner(ScanConfig()).scan(tmp_path) == []

    def test_given_missing_root_then_scan_error(self, tmp_path: Path) -> None:
        with pytest.raises(ScanError):
            ScriptedTestScanner(ScanConfig()).scan(tmp_path / "missing")

    def test_custom_decorators_from_config(self, tmp_path: Path) -> None:
        (tmp_path / "t.py").write_text(
            "class T:\n    @slow_test()\n    def test_slow(self):\n        pass\n"
        )

        records = ScriptedTestScanner(ScanConfig(py_test_decorators=["slow_test"])).scan(tmp_path)

        assert [r.name for r in records] == ["test_slow"]
