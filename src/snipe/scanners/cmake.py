"""Minimal CMake reader for test target declarations.

Only the handful of commands that test manifests use to declare targets
are interpreted:

    set(NAME a.cc b.cc)
    list(APPEND NAME c.cc)
    foreach(VAR ${NAME})            # also: foreach(VAR IN LISTS NAME ITEMS x)
      get_filename_component(OUT ${VAR} NAME_WE)
      rp_test(UNIT_TEST BINARY_NAME ${OUT} SOURCES ${VAR} LIBRARIES ...)
    endforeach()

Every other command is skipped. Conditionals are not evaluated, so targets
declared in any branch are reported.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import PurePosixPath

_COMMAND_RE = re.compile(r"([A-Za-z_][A-Za-z0-9_]*)[ \t]*\(")
_TOKEN_RE = re.compile(r'"((?:[^"\\]|\\.)*)"|([^\s"]+)')
_VAR_RE = re.compile(r"\$\{([A-Za-z0-9_.+-]+)\}")

_TARGET_SUFFIXES = {
    "UNIT_TEST": "rpunit",
    "FIXTURE_TEST": "rpfixture",
    "BENCHMARK_TEST": "rpbench",
}


class CMakeParseError(Exception):
    """A manifest could not be read as a sequence of commands."""


@dataclass(frozen=True)
class _Arg:
    value: str
    quoted: bool


@dataclass
class _Command:
    name: str
    args: list[_Arg]
    line: int


@dataclass
class RpTest:
    """One ``rp_test`` declaration after variable expansion."""

    test_type: str
    binary_name: str
    sources: list[str] = field(default_factory=list)

    @property
    def build_target(self) -> str:
        return f"{self.binary_name}_{_TARGET_SUFFIXES[self.test_type]}"


def _strip_comments(text: str) -> str:
    out: list[str] = []
    for line in text.splitlines():
        in_quote = False
        cut = len(line)
        for i, ch in enumerate(line):
            if ch == '"' and (i == 0 or line[i - 1] != "\\"):
                in_quote = not in_quote
            elif ch == "#" and not in_quote:
                cut = i
                break
        out.append(line[:cut])
    return "\n".join(out)


def _closing_paren(text: str, start: int) -> int:
    """Index of the ``)`` closing the ``(`` just before ``start``."""
    depth = 1
    in_quote = False
    i = start
    while i < len(text):
        ch = text[i]
        if ch == "\\" and in_quote:
            i += 2
            continue
        if ch == '"':
            in_quote = not in_quote
        elif not in_quote:
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0:
                    return i
        i += 1
    return -1


def _tokenize(body: str) -> list[_Arg]:
    args: list[_Arg] = []
    for match in _TOKEN_RE.finditer(body):
        quoted, bare = match.groups()
        if quoted is not None:
            args.append(_Arg(quoted, quoted=True))
        else:
            args.append(_Arg(bare, quoted=False))
    return args


def iter_commands(text: str) -> Iterator[_Command]:
    """Split manifest text into commands.

    Raises:
        CMakeParseError: On an unterminated argument list.
    """
    text = _strip_comments(text)
    pos = 0
    while match := _COMMAND_RE.search(text, pos):
        end = _closing_paren(text, match.end())
        line = text.count("\n", 0, match.start()) + 1
        if end < 0:
            raise CMakeParseError(f"unterminated {match.group(1)}( at line {line}")
        body = text[match.end() : end]
        yield _Command(match.group(1).lower(), _tokenize(body), line)
        pos = end + 1


class _Scope:
    """Variable bindings. Values are CMake lists."""

    def __init__(self, variables: Mapping[str, list[str]] | None = None) -> None:
        self.variables: dict[str, list[str]] = dict(variables or {})

    def expand(self, args: list[_Arg]) -> list[str]:
        values: list[str] = []
        for arg in args:
            whole = _VAR_RE.fullmatch(arg.value)
            if whole and not arg.quoted:
                values.extend(self.variables.get(whole.group(1), []))
                continue
            expanded = _VAR_RE.sub(
                lambda m: ";".join(self.variables.get(m.group(1), [])), arg.value
            )
            if arg.quoted:
                values.append(expanded)
            else:
                values.extend(part for part in expanded.split(";") if part)
        return values


def _filename_component(value: str, mode: str) -> str:
    path = PurePosixPath(value)
    if mode == "NAME":
        return path.name
    if mode == "NAME_WE":
        return path.name.split(".", 1)[0]
    if mode in ("DIRECTORY", "PATH"):
        return str(path.parent)
    if mode == "EXT":
        name = path.name
        return name[name.find(".") :] if "." in name else ""
    return value


def _parse_rp_test(values: list[str], line: int) -> RpTest:
    if not values or values[0] not in _TARGET_SUFFIXES:
        found = values[0] if values else "nothing"
        raise CMakeParseError(f"unexpected rp_test type {found!r} at line {line}")
    try:
        binary_name = values[values.index("BINARY_NAME") + 1]
    except (ValueError, IndexError):
        raise CMakeParseError(f"rp_test without BINARY_NAME at line {line}") from None

    sources: list[str] = []
    if "SOURCES" in values:
        for token in values[values.index("SOURCES") + 1 :]:
            if _is_keyword(token):
                break
            sources.append(token)
    return RpTest(test_type=values[0], binary_name=binary_name, sources=sources)


def _is_keyword(token: str) -> bool:
    return all(c.isupper() or c == "_" for c in token)


def _foreach_items(args: list[str], scope: _Scope) -> list[str]:
    if len(args) > 1 and args[1] == "IN":
        items: list[str] = []
        mode = None
        for token in args[2:]:
            if token in ("LISTS", "ITEMS"):
                mode = token
            elif mode == "LISTS":
                items.extend(scope.variables.get(token, []))
            elif mode == "ITEMS":
                items.append(token)
        return items
    return args[1:]


def _run(commands: list[_Command], scope: _Scope, tests: list[RpTest]) -> None:
    i = 0
    while i < len(commands):
        command = commands[i]
        if command.name == "foreach":
            body_end = _matching_endforeach(commands, i)
            args = scope.expand(command.args)
            if not args:
                raise CMakeParseError(f"foreach without loop variable at line {command.line}")
            body = commands[i + 1 : body_end]
            # foreach shares the enclosing scope; only the loop variable is restored
            saved = scope.variables.get(args[0])
            for item in _foreach_items(args, scope):
                scope.variables[args[0]] = [item]
                _run(body, scope, tests)
            if saved is None:
                scope.variables.pop(args[0], None)
            else:
                scope.variables[args[0]] = saved
            i = body_end + 1
            continue
        if command.name == "endforeach":
            raise CMakeParseError(f"endforeach without foreach at line {command.line}")
        _apply(command, scope, tests)
        i += 1


def _matching_endforeach(commands: list[_Command], start: int) -> int:
    depth = 0
    for j in range(start, len(commands)):
        if commands[j].name == "foreach":
            depth += 1
        elif commands[j].name == "endforeach":
            depth -= 1
            if depth == 0:
                return j
    raise CMakeParseError(f"foreach at line {commands[start].line} has no endforeach")


def _apply(command: _Command, scope: _Scope, tests: list[RpTest]) -> None:
    if command.name == "set":
        values = scope.expand(command.args)
        if values:
            scope.variables[values[0]] = [
                v for v in values[1:] if v not in ("PARENT_SCOPE", "CACHE")
            ]
    elif command.name == "list":
        values = scope.expand(command.args)
        if len(values) >= 2 and values[0] == "APPEND":
            scope.variables.setdefault(values[1], []).extend(values[2:])
    elif command.name == "get_filename_component":
        values = scope.expand(command.args)
        if len(values) >= 3:
            scope.variables[values[0]] = [_filename_component(values[1], values[2])]
    elif command.name == "rp_test":
        tests.append(_parse_rp_test(scope.expand(command.args), command.line))


def parse_manifest(text: str, variables: Mapping[str, str] | None = None) -> list[RpTest]:
    """Return the ``rp_test`` targets declared in a manifest, in order.

    Args:
        text: Manifest contents.
        variables: Predefined variables such as CMAKE_CURRENT_SOURCE_DIR.

    Raises:
        CMakeParseError: On malformed commands or rp_test declarations.
    """
    scope = _Scope({k: [v] for k, v in (variables or {}).items()})
    tests: list[RpTest] = []
    _run(list(iter_commands(text)), scope, tests)
    return tests
