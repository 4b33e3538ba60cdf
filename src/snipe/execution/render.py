"""Command rendering for resolved tests.

Templates come from ``commands.command_mappings`` and are rendered with
jinja2. Compiled tests produce two commands (``compile`` then ``run``),
scripted tests one (``duck``).
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateError

from snipe.core.errors import ExecutionError
from snipe.index.models import CompiledLocation, ScriptedLocation, TestRecord

COMPILE_TEMPLATE = "compile"
RUN_TEMPLATE = "run"
SCRIPTED_TEMPLATE = "duck"


class CommandRenderer:
    """Turn a resolved record into shell command strings.

    Args:
        templates: Template name to jinja2 source.
        build_type: Build variant, e.g. DEBUG or RELEASE.
        test_args: Extra arguments for scripted tests.
        cwd: Directory substituted for ``pwd``. Defaults to the process cwd.
    """

    def __init__(
        self,
        templates: Mapping[str, str],
        build_type: str,
        *,
        test_args: str = "",
        cwd: Path | None = None,
    ) -> None:
        self._templates = dict(templates)
        self._build_type = build_type
        self._test_args = test_args
        self._cwd = cwd
        self._env = Environment(
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=False,
        )

    def _render(self, name: str, context: Mapping[str, Any]) -> str:
        source = self._templates.get(name)
        if source is None:
            raise ExecutionError.missing_template(name)
        try:
            return self._env.from_string(source).render(**context).strip()
        except TemplateError as e:
            raise ExecutionError.render_failed(name, str(e)) from e

    def render(self, record: TestRecord) -> list[str]:
        """Render every command needed to build and run ``record``.

        Raises:
            ExecutionError: On a missing template or a rendering error.
        """
        loc = record.location
        if isinstance(loc, CompiledLocation):
            return self._render_compiled(record.name, loc)
        return self._render_scripted(record.name, loc)

    def _render_compiled(self, test_name: str, loc: CompiledLocation) -> list[str]:
        pwd = self._cwd or Path.cwd()
        base = {
            "build_type": self._build_type,
            "test_obj": loc.build_target,
            "test_name": test_name,
            "source_file": loc.source_file,
        }
        return [
            self._render(COMPILE_TEMPLATE, base),
            self._render(
                RUN_TEMPLATE,
                {**base, "test_tag_arg": f"-t {test_name}", "pwd": str(pwd)},
            ),
        ]

    def _render_scripted(self, test_name: str, loc: ScriptedLocation) -> list[str]:
        context = {
            "test_path": f"{loc.module_path}::{loc.container_name}.{test_name}",
            "test_args": self._test_args,
            "test_name": test_name,
            "build_type": self._build_type,
        }
        return [self._render(SCRIPTED_TEMPLATE, context)]
