"""asyncio event loop that runs the interactive controller."""

import asyncio
from collections.abc import Awaitable, Callable

import click
from rich.console import Console
from rich.live import Live

from sshkeygen.common.errors import KeygenError
from sshkeygen.common.logging import get_logger
from sshkeygen.keys.pipeline import Stage, run_stage
from sshkeygen.session import Phase, Session
from sshkeygen.tui.controller import (
    Command,
    Event,
    Exit,
    InteractionController,
    KeyPressed,
    RunStage,
    ScheduleSettle,
    ScheduleTick,
    SettleElapsed,
    StageCompleted,
    StageFailed,
    Tick,
)
from sshkeygen.tui.progress import ProgressAnimator
from sshkeygen.tui.view import Theme, render

logger = get_logger(__name__)

# Cosmetic delay before each stage so the progress bar is readable.
STAGE_PACING: dict[Stage, float] = {
    Stage.GENERATE_KEYPAIR: 0.5,
    Stage.ENCODE_PRIVATE: 0.3,
    Stage.ENCODE_PUBLIC: 0.3,
    Stage.PERSIST_PRIVATE: 0.4,
    Stage.PERSIST_PUBLIC: 0.4,
}

_KEY_NAMES: dict[str, str] = {
    "\r": "enter",
    "\n": "enter",
    " ": "space",
    "\x03": "ctrl+c",
    "\x1b[A": "up",
    "\x1bOA": "up",
    "\xe0H": "up",
    "\x00H": "up",
    "\x1b[B": "down",
    "\x1bOB": "down",
    "\xe0P": "down",
    "\x00P": "down",
}

KeySource = Callable[[], Awaitable[str]]
StageRunner = Callable[[Session, Stage], None]


def normalize_key(raw: str) -> str:
    """Map a raw terminal sequence to a key name."""
    return _KEY_NAMES.get(raw, raw)


def read_key() -> str:
    """Block until one key is pressed and return its name."""
    try:
        raw = click.getchar()
    except KeyboardInterrupt:
        return "ctrl+c"
    except EOFError:
        return "ctrl+d"
    return normalize_key(raw)


async def terminal_key_source() -> str:
    """Read one key in a worker thread."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, read_key)


class InteractiveApp:
    """
    Single-threaded event loop around an ``InteractionController``.

    Events (keys, stage results, timers) are processed one at a time from a
    queue. Stage functions run in worker threads, but a stage is only
    dispatched when the controller asks for it, so stages never overlap.
    """

    def __init__(
        self,
        controller: InteractionController,
        console: Console | None = None,
        theme: Theme | None = None,
        key_source: KeySource = terminal_key_source,
        stage_runner: StageRunner = run_stage,
        pacing_scale: float = 1.0,
    ):
        self._controller = controller
        self._console = console or Console()
        self._theme = theme or Theme()
        self._key_source = key_source
        self._stage_runner = stage_runner
        self._pacing_scale = pacing_scale
        self._animator = ProgressAnimator()
        self._events: asyncio.Queue[Event] = asyncio.Queue()
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def animator(self) -> ProgressAnimator:
        return self._animator

    async def run(self) -> int:
        """Run until the controller asks to exit and return the exit code."""
        self._arm_input()
        screen = self._console.is_terminal
        exit_code: int | None = None
        try:
            with Live(
                self._render(),
                console=self._console,
                screen=screen,
                auto_refresh=False,
            ) as live:
                while exit_code is None:
                    event = await self._events.get()
                    exit_code = self._process(event)
                    live.update(self._render(), refresh=True)
        finally:
            await self._cancel_pending()

        if screen and self._controller.phase is Phase.COMPLETE:
            self._console.print(self._render())
        return exit_code

    def _process(self, event: Event) -> int | None:
        if isinstance(event, Tick):
            self._animator.tick()

        commands = self._controller.handle(event)
        self._animator.set_target(self._controller.session.progress)

        exit_code = None
        for command in commands:
            code = self._execute(command)
            if code is not None:
                exit_code = code

        if isinstance(event, KeyPressed) and exit_code is None:
            self._arm_input()
        return exit_code

    def _execute(self, command: Command) -> int | None:
        if isinstance(command, Exit):
            return command.code
        if isinstance(command, RunStage):
            self._spawn(self._run_stage(command.stage))
        elif isinstance(command, ScheduleTick):
            self._spawn(self._post_later(command.delay, Tick()))
        elif isinstance(command, ScheduleSettle):
            self._spawn(self._post_later(command.delay, SettleElapsed()))
        return None

    def _render(self):
        return render(
            self._controller.session,
            self._controller.algorithms,
            progress_value=self._animator.value,
            theme=self._theme,
            width=self._console.width,
        )

    def _spawn(self, coro: Awaitable[None]) -> None:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _arm_input(self) -> None:
        self._spawn(self._read_input())

    async def _read_input(self) -> None:
        key = await self._key_source()
        await self._events.put(KeyPressed(key))

    async def _post_later(self, delay: float, event: Event) -> None:
        await asyncio.sleep(delay)
        await self._events.put(event)

    async def _run_stage(self, stage: Stage) -> None:
        delay = STAGE_PACING[stage] * self._pacing_scale
        if delay > 0:
            await asyncio.sleep(delay)
        try:
            await asyncio.to_thread(self._stage_runner, self._controller.session, stage)
        except KeygenError as e:
            await self._events.put(StageFailed(stage, str(e)))
            return
        except Exception as e:
            logger.exception("Unexpected stage failure", stage=stage.name.lower())
            await self._events.put(StageFailed(stage, f"unexpected error: {e}"))
            return
        await self._events.put(StageCompleted(stage))

    async def _cancel_pending(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
