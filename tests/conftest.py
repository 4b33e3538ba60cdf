"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and keeps every test away from the real XDG config and data directories.
"""

import logging
import os
import sys
from collections.abc import Generator
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

import structlog  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point XDG dirs at tmp_path and drop SNIPE__ / BUILD_TYPE overrides."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg_config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg_data"))
    monkeypatch.delenv("BUILD_TYPE", raising=False)
    for key in list(os.environ):
        if key.startswith("SNIPE__"):
            monkeypatch.delenv(key)
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """A small checkout with one compiled and one scripted test tree.

    Layout::

        repo/src/v/rpk/tests/CMakeLists.txt   -> rpk_test_rpunit
        repo/src/v/rpk/tests/rpk_test.cc      -> test_aws_credentials, test_foo, test_foobar
        repo/tests/rptest/basic_test.py       -> BasicAssignmentTest.test_basic_assignment
    """
    repo = tmp_path / "repo"
    cc_tests = repo / "src" / "v" / "rpk" / "tests"
    cc_tests.mkdir(parents=True)
    (cc_tests / "CMakeLists.txt").write_text(
        "rp_test(\n"
        "  UNIT_TEST\n"
        "  BINARY_NAME rpk_test\n"
        "  SOURCES rpk_test.cc\n"
        "  LIBRARIES v::rpk\n"
        "  LABELS rpk\n"
        ")\n"
    )
    (cc_tests / "rpk_test.cc").write_text(
        "#include <boost/test/unit_test.hpp>\n"
        "\n"
        "BOOST_AUTO_TEST_CASE(test_aws_credentials) {\n"
        "    BOOST_REQUIRE(true);\n"
        "}\n"
        "\n"
        "SEASTAR_THREAD_TEST_CASE(test_foo) {}\n"
        "SEASTAR_THREAD_TEST_CASE(test_foobar) {}\n"
    )

    py_tests = repo / "tests" / "rptest"
    py_tests.mkdir(parents=True)
    (py_tests / "basic_test.py").write_text(
        "from ducktape.mark.resource import cluster\n"
        "\n"
        "\n"
        "class BasicAssignmentTest(RedpandaTest):\n"
        "    @cluster(num_nodes=3)\n"
        "    def test_basic_assignment(self):\n"
        "        pass\n"
        "\n"
        "    def helper(self):\n"
        "        pass\n"
    )
    return repo


@pytest.fixture
def in_repo(source_tree: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test with the sample checkout as working directory."""
    monkeypatch.chdir(source_tree)
    return source_tree
