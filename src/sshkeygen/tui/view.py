"""Terminal rendering of an interactive session."""

from dataclasses import dataclass

from rich.console import Group, RenderableType
from rich.padding import Padding
from rich.progress_bar import ProgressBar
from rich.text import Text

from sshkeygen import APP_TITLE, __version__
from sshkeygen.keys.catalog import AlgorithmSpec
from sshkeygen.keys.pipeline import PRIVATE_KEY_MODE, PUBLIC_KEY_MODE
from sshkeygen.session import Phase, Session


@dataclass(frozen=True)
class Theme:
    """Styles and layout constants for the interactive screens."""

    title: str = "bold #04B575"
    success: str = "bold #04B575"
    error: str = "bold #FF5F87"
    warning: str = "bold #FFA500"
    help: str = "#626262"
    cursor: str = "bold"
    bar_complete: str = "#04B575"
    bar_finished: str = "#04B575"
    padding: int = 2
    max_width: int = 80


SELECTION_HELP = "↑/↓ or k/j to move • enter to select • q to quit"
CONFIRM_HELP = "Press 'y' to overwrite, 'n' or 'q' to cancel"


def bar_width(terminal_width: int, theme: Theme) -> int:
    """Progress bar width for a terminal of the given width."""
    return max(10, min(terminal_width - theme.padding * 2 - 4, theme.max_width))


def _header(theme: Theme, with_version: bool = True) -> list[RenderableType]:
    lines: list[RenderableType] = [Text(APP_TITLE, style=theme.title)]
    if with_version:
        lines.append(Text(f"Version {__version__}"))
    lines.append(Text(""))
    return lines


def _selection(session: Session, algorithms: tuple[AlgorithmSpec, ...], theme: Theme):
    lines = _header(theme)
    lines.append(Text("Select encryption algorithm:"))
    lines.append(Text(""))
    for index, spec in enumerate(algorithms):
        if index == session.cursor:
            lines.append(Text(f"▶  {spec.name} - {spec.description}", style=theme.cursor))
        else:
            lines.append(Text(f"   {spec.name} - {spec.description}"))
    lines.append(Text(""))
    if session.message:
        lines.append(Text(session.message, style=theme.error))
    lines.append(Text(SELECTION_HELP, style=theme.help))
    return lines


def _confirm(session: Session, theme: Theme):
    lines = _header(theme)
    lines.append(Text("⚠️  Key files already exist:", style=theme.warning))
    for path in session.existing_paths:
        lines.append(Text(f"  {path}"))
    lines.append(Text(""))
    lines.append(Text("Overwrite? (y/N)"))
    lines.append(Text(""))
    lines.append(Text(CONFIRM_HELP, style=theme.help))
    return lines


def _generating(session: Session, progress_value: float, theme: Theme, width: int):
    lines = _header(theme, with_version=False)
    lines.append(
        ProgressBar(
            total=1.0,
            completed=progress_value,
            width=bar_width(width, theme),
            complete_style=theme.bar_complete,
            finished_style=theme.bar_finished,
        )
    )
    lines.append(Text(f"{progress_value:4.0%}"))
    lines.append(Text(""))
    lines.append(Text(f"Generating {session.description}..."))
    lines.append(Text(session.message))
    lines.append(Text(""))
    lines.append(Text("Please wait...", style=theme.help))
    return lines


def _complete(session: Session, theme: Theme):
    lines = _header(theme)
    lines.append(Text("✅ Key generation completed successfully!", style=theme.success))
    lines.append(Text(""))
    lines.append(
        Text(f"Private key saved to: {session.private_path} (permissions {PRIVATE_KEY_MODE:04o})")
    )
    lines.append(
        Text(f"Public key saved to:  {session.public_path} (permissions {PUBLIC_KEY_MODE:04o})")
    )
    if session.comment:
        lines.append(Text(f"Key comment: {session.comment}"))
    lines.append(Text(""))
    lines.append(Text("Press any key to exit", style=theme.help))
    return lines


def _error(session: Session, theme: Theme):
    lines = _header(theme, with_version=False)
    lines.append(Text("❌ Error occurred:", style=theme.error))
    lines.append(Text(session.message))
    lines.append(Text(""))
    lines.append(Text("Press any key to exit", style=theme.help))
    return lines


def render(
    session: Session,
    algorithms: tuple[AlgorithmSpec, ...],
    progress_value: float = 0.0,
    theme: Theme | None = None,
    width: int = 80,
) -> RenderableType:
    """Build the screen for the session's current phase."""
    theme = theme or Theme()
    phase = session.phase

    if phase is Phase.ALGORITHM_SELECTION:
        lines = _selection(session, algorithms, theme)
    elif phase is Phase.CONFIRM:
        lines = _confirm(session, theme)
    elif phase in (Phase.GENERATING, Phase.PROGRESS_COMPLETE):
        lines = _generating(session, progress_value, theme, width)
    elif phase is Phase.COMPLETE:
        lines = _complete(session, theme)
    else:
        lines = _error(session, theme)

    return Padding(Group(Text(""), *lines), (0, theme.padding))
