"""Interactive key generation state machine."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from sshkeygen.common.errors import ExitCode, ValidationError
from sshkeygen.common.logging import get_logger
from sshkeygen.keys import catalog
from sshkeygen.keys.catalog import AlgorithmSpec
from sshkeygen.keys.persistence import any_exists
from sshkeygen.keys.pipeline import Stage
from sshkeygen.session import Phase, Session
from sshkeygen.tui.progress import START_MESSAGE, stage_fraction, stage_status

logger = get_logger(__name__)


# === Events ===


@dataclass(frozen=True)
class KeyPressed:
    key: str


@dataclass(frozen=True)
class StageCompleted:
    stage: Stage


@dataclass(frozen=True)
class StageFailed:
    stage: Stage
    message: str


@dataclass(frozen=True)
class SettleElapsed:
    pass


@dataclass(frozen=True)
class Tick:
    pass


Event = KeyPressed | StageCompleted | StageFailed | SettleElapsed | Tick


# === Commands ===


@dataclass(frozen=True)
class RunStage:
    stage: Stage


@dataclass(frozen=True)
class ScheduleTick:
    delay: float


@dataclass(frozen=True)
class ScheduleSettle:
    delay: float


@dataclass(frozen=True)
class Exit:
    code: int = ExitCode.OK


Command = RunStage | ScheduleTick | ScheduleSettle | Exit


class Intent(str, Enum):
    """What a key press means to the controller."""

    CURSOR_UP = "cursor_up"
    CURSOR_DOWN = "cursor_down"
    SELECT = "select"
    QUIT = "quit"
    YES = "yes"
    NO = "no"
    OTHER = "other"


KEYMAP: dict[str, Intent] = {
    "up": Intent.CURSOR_UP,
    "k": Intent.CURSOR_UP,
    "down": Intent.CURSOR_DOWN,
    "j": Intent.CURSOR_DOWN,
    "enter": Intent.SELECT,
    "space": Intent.SELECT,
    "q": Intent.QUIT,
    "Q": Intent.QUIT,
    "ctrl+c": Intent.QUIT,
    "y": Intent.YES,
    "Y": Intent.YES,
    "n": Intent.NO,
    "N": Intent.NO,
}


def _event_kind(event: Event) -> Intent | type:
    if isinstance(event, KeyPressed):
        return KEYMAP.get(event.key, Intent.OTHER)
    return type(event)


Handler = Callable[["InteractionController", Event], list[Command]]


class InteractionController:
    """
    Drives one interactive session from user input and stage results.

    Each (phase, event kind) pair maps to a handler in ``TRANSITIONS``. A
    handler mutates the session (including its phase) and returns the
    commands the runtime must execute. Pairs missing from the table are
    ignored.
    """

    def __init__(
        self,
        session: Session | None = None,
        algorithms: tuple[AlgorithmSpec, ...] | None = None,
        output_dir: str | Path = ".",
        settle_delay: float = 2.0,
        tick_interval: float = 0.1,
        exists: Callable[..., bool] = any_exists,
    ):
        self.session = session or Session()
        self.algorithms = algorithms or catalog.list_algorithms()
        self._output_dir = output_dir
        self._settle_delay = settle_delay
        self._tick_interval = tick_interval
        self._exists = exists

    @property
    def phase(self) -> Phase:
        return self.session.phase

    def handle(self, event: Event) -> list[Command]:
        """Apply one event and return the resulting commands."""
        handler = TRANSITIONS.get((self.session.phase, _event_kind(event)))
        if handler is None:
            return []
        previous = self.session.phase
        commands = handler(self, event)
        if self.session.phase is not previous:
            logger.debug(
                "Phase transition",
                from_phase=previous.value,
                to_phase=self.session.phase.value,
            )
        return commands

    # --- algorithm selection ---

    def _cursor_up(self, event: Event) -> list[Command]:
        self.session.cursor = max(0, self.session.cursor - 1)
        return []

    def _cursor_down(self, event: Event) -> list[Command]:
        self.session.cursor = min(len(self.algorithms) - 1, self.session.cursor + 1)
        return []

    def _select(self, event: Event) -> list[Command]:
        spec = self.algorithms[self.session.cursor]
        try:
            self.session.bind(spec, output_dir=self._output_dir)
        except ValidationError as e:
            self.session.message = str(e)
            return []

        self.session.message = ""
        self.session.existing_paths = tuple(
            path
            for path in (self.session.private_path, self.session.public_path)
            if path is not None and self._exists(path)
        )
        if self.session.existing_paths:
            self.session.phase = Phase.CONFIRM
            return []
        return self._start_generation()

    def _quit(self, event: Event) -> list[Command]:
        return [Exit(ExitCode.OK)]

    # --- confirmation ---

    def _confirm(self, event: Event) -> list[Command]:
        return self._start_generation()

    # --- generation ---

    def _start_generation(self) -> list[Command]:
        self.session.phase = Phase.GENERATING
        self.session.message = START_MESSAGE
        self.session.progress = 0.0
        self.session.pending_stage = Stage.GENERATE_KEYPAIR
        self.session.reset_artifacts()
        return [RunStage(Stage.GENERATE_KEYPAIR), ScheduleTick(self._tick_interval)]

    def _stage_completed(self, event: Event) -> list[Command]:
        assert isinstance(event, StageCompleted)
        if event.stage != self.session.pending_stage:
            return self._fail(
                f"stage {event.stage.name.lower()} completed out of order "
                f"(waiting for stage {self.session.pending_stage})"
            )

        self.session.progress = stage_fraction(event.stage)
        self.session.message = stage_status(event.stage, self.session)

        next_stage = event.stage.next
        if next_stage is None:
            self.session.pending_stage = None
            self.session.phase = Phase.PROGRESS_COMPLETE
            return [ScheduleSettle(self._settle_delay)]

        self.session.pending_stage = next_stage
        return [RunStage(next_stage)]

    def _stage_failed(self, event: Event) -> list[Command]:
        assert isinstance(event, StageFailed)
        return self._fail(event.message)

    def _fail(self, message: str) -> list[Command]:
        self.session.pending_stage = None
        self.session.phase = Phase.ERROR
        self.session.message = f"Error: {message}"
        logger.info("Key generation failed", error=message)
        return []

    def _tick(self, event: Event) -> list[Command]:
        return [ScheduleTick(self._tick_interval)]

    def _settled(self, event: Event) -> list[Command]:
        self.session.phase = Phase.COMPLETE
        return []

    # --- terminal phases ---

    def _exit_ok(self, event: Event) -> list[Command]:
        return [Exit(ExitCode.OK)]

    def _exit_failure(self, event: Event) -> list[Command]:
        return [Exit(ExitCode.FAILURE)]


_ALL_KEYS = tuple(Intent)

TRANSITIONS: dict[tuple[Phase, Intent | type], Handler] = {
    (Phase.ALGORITHM_SELECTION, Intent.CURSOR_UP): InteractionController._cursor_up,
    (Phase.ALGORITHM_SELECTION, Intent.CURSOR_DOWN): InteractionController._cursor_down,
    (Phase.ALGORITHM_SELECTION, Intent.SELECT): InteractionController._select,
    (Phase.ALGORITHM_SELECTION, Intent.QUIT): InteractionController._quit,
    (Phase.CONFIRM, Intent.YES): InteractionController._confirm,
    (Phase.CONFIRM, Intent.NO): InteractionController._quit,
    (Phase.CONFIRM, Intent.QUIT): InteractionController._quit,
    (Phase.GENERATING, StageCompleted): InteractionController._stage_completed,
    (Phase.GENERATING, StageFailed): InteractionController._stage_failed,
    (Phase.GENERATING, Tick): InteractionController._tick,
    (Phase.PROGRESS_COMPLETE, Tick): InteractionController._tick,
    (Phase.PROGRESS_COMPLETE, SettleElapsed): InteractionController._settled,
    **{(Phase.COMPLETE, intent): InteractionController._exit_ok for intent in _ALL_KEYS},
    **{(Phase.ERROR, intent): InteractionController._exit_failure for intent in _ALL_KEYS},
}
