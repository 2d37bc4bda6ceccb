"""sshkeygen CLI - interactive and one-shot SSH key generation."""

import asyncio
import sys
from pathlib import Path

import click
from click.core import ParameterSource
from rich.console import Console
from rich.markup import escape

from sshkeygen import __version__
from sshkeygen.common.errors import ExitCode, KeygenError, OverwriteRefused
from sshkeygen.common.logging import get_logger, setup_logging
from sshkeygen.common.settings import Settings, get_settings
from sshkeygen.keys import catalog
from sshkeygen.keys.persistence import any_exists
from sshkeygen.keys.pipeline import PRIVATE_KEY_MODE, PUBLIC_KEY_MODE, run_pipeline
from sshkeygen.session import Session
from sshkeygen.tui.controller import InteractionController
from sshkeygen.tui.runtime import InteractiveApp
from sshkeygen.tui.view import Theme

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

logger = get_logger(__name__)

_OPTION_NAMES = ("algorithm", "bits", "output", "comment", "force")


def check_overwrite(private_path: Path, public_path: Path) -> None:
    """Raise ``OverwriteRefused`` for the first key file that already exists."""
    for path in (private_path, public_path):
        if any_exists(path):
            raise OverwriteRefused(str(path))


def run_non_interactive(
    settings: Settings,
    algorithm: str | None,
    bits: int | None,
    output: str | None,
    comment: str,
    force: bool,
) -> int:
    """
    Generate a key pair without prompting.

    Returns:
        Process exit code
    """
    try:
        spec = catalog.get_algorithm(algorithm or settings.default_algorithm)
        session = Session()
        session.bind(
            spec,
            key_size=bits,
            private_path=output,
            output_dir=settings.output_dir,
            comment=comment,
        )
        assert session.private_path is not None
        assert session.public_path is not None
        if not force:
            check_overwrite(session.private_path, session.public_path)

        console.print(f"Generating {session.description}...")
        run_pipeline(session)
    except OverwriteRefused as e:
        err_console.print(f"[red]error: {escape(str(e))}[/red]")
        return ExitCode.OVERWRITE_REFUSED
    except KeygenError as e:
        err_console.print(f"[red]error: {escape(str(e))}[/red]")
        return ExitCode.FAILURE

    console.print(
        f"[green]Private key saved to {escape(str(session.private_path))} "
        f"(permissions {PRIVATE_KEY_MODE:04o})[/green]"
    )
    console.print(
        f"[green]Public key saved to {escape(str(session.public_path))} "
        f"(permissions {PUBLIC_KEY_MODE:04o})[/green]"
    )
    if session.comment:
        console.print(f"Key comment: {escape(session.comment)}")
    return ExitCode.OK


def run_interactive(settings: Settings) -> int:
    """Run the full-screen interactive flow."""
    if not sys.stdin.isatty():
        err_console.print("[red]error: interactive mode requires a terminal (see --help)[/red]")
        return ExitCode.FAILURE

    controller = InteractionController(
        output_dir=settings.output_dir,
        settle_delay=settings.settle_delay,
        tick_interval=settings.tick_interval,
    )
    app = InteractiveApp(
        controller,
        console=console,
        theme=Theme(),
        pacing_scale=settings.stage_pacing_scale,
    )
    return asyncio.run(app.run())


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-t",
    "algorithm",
    type=click.Choice(["rsa", "ed25519", "ecdsa"], case_sensitive=False),
    default=None,
    help="Key algorithm (default: rsa)",
)
@click.option(
    "-b",
    "bits",
    type=int,
    default=None,
    help="Key size in bits (default: 4096 for RSA, 256 for ECDSA; ignored for ED25519)",
)
@click.option(
    "-f",
    "output",
    type=click.Path(dir_okay=False),
    default=None,
    help="Private key path; the public key is written to <path>.pub",
)
@click.option("-C", "comment", default="", help="Key comment (e.g. user@host)")
@click.option("-force", "--force", "force", is_flag=True, help="Overwrite existing files")
@click.version_option(__version__, "--version", prog_name="sshkeygen")
@click.pass_context
def cli(
    ctx: click.Context,
    algorithm: str | None,
    bits: int | None,
    output: str | None,
    comment: str,
    force: bool,
) -> None:
    """Generate an SSH key pair.

    Without options an interactive menu is shown; any option switches to
    one-shot mode.
    """
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_json, settings.log_file)

    interactive = all(
        ctx.get_parameter_source(name) is ParameterSource.DEFAULT for name in _OPTION_NAMES
    )
    if interactive:
        logger.debug("Starting interactive mode")
        code = run_interactive(settings)
    else:
        code = run_non_interactive(settings, algorithm, bits, output, comment, force)
    ctx.exit(code)


def main() -> None:
    """CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
