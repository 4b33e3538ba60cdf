"""Interactive disambiguation between records sharing a name."""

from __future__ import annotations

import questionary

from snipe.core.progress import get_console, pluralize, suppress_console_logs
from snipe.index.models import Ambiguous, TestRecord

_STYLE = questionary.Style(
    [
        ("question", "bold"),
        ("highlighted", "fg:cyan bold"),
        ("selected", "fg:cyan"),
    ]
)


# questionary replaces a None value with the title
_QUIT = "__quit__"


def select_record(result: Ambiguous) -> TestRecord | None:
    """List every candidate and ask for one. None means the user quit."""
    console = get_console()
    console.print()
    console.print(
        f"[bold]Multiple matches found for {result.name}[/bold] "
        f"({pluralize(len(result.records), 'candidate')})"
    )
    for position, record in enumerate(result.records, start=1):
        console.print(f"  [cyan][{position}][/cyan] {record.location}", highlight=False)
    console.print()

    choices = [
        questionary.Choice(f"[{position}] {record.location}", value=record)
        for position, record in enumerate(result.records, start=1)
    ]
    choices.append(questionary.Choice("Quit", value=_QUIT))

    with suppress_console_logs():
        answer = questionary.select(
            "Please select one of the matching tests:",
            choices=choices,
            style=_STYLE,
        ).ask()
    if answer is None or answer == _QUIT:
        return None
    return answer
