"""Stage progress mapping and the cosmetic progress bar animation."""

from sshkeygen.keys.pipeline import STAGE_COUNT, Stage
from sshkeygen.session import Session

START_MESSAGE = "Starting key generation..."
FINALIZING_MESSAGE = "Finalizing key generation..."


def stage_fraction(stage: Stage | int) -> float:
    """Completion fraction once ``stage`` has finished (0.2 steps)."""
    return round(Stage(stage) / STAGE_COUNT, 2)


def stage_status(stage: Stage | int, session: Session) -> str:
    """Status text naming the stage just finished and the next one."""
    stage = Stage(stage)
    if stage is Stage.GENERATE_KEYPAIR:
        name = session.algorithm.label(session.key_size) if session.algorithm else "Key"
        return f"{name} key generated, encoding private key..."
    if stage is Stage.ENCODE_PRIVATE:
        return "Private key encoded, generating public key..."
    if stage is Stage.ENCODE_PUBLIC:
        return "Public key generated, writing private key..."
    if stage is Stage.PERSIST_PRIVATE:
        return "Private key written, writing public key..."
    return FINALIZING_MESSAGE


class ProgressAnimator:
    """
    Eases a displayed value toward the target fraction on every tick.

    Purely presentational: the value never drops and snaps onto the target
    once it is close enough.
    """

    def __init__(self, easing: float = 0.35, snap: float = 0.005):
        self._easing = easing
        self._snap = snap
        self._value = 0.0
        self._target = 0.0

    @property
    def value(self) -> float:
        return self._value

    @property
    def target(self) -> float:
        return self._target

    def set_target(self, target: float) -> None:
        self._target = max(self._target, min(1.0, target))

    def tick(self) -> float:
        gap = self._target - self._value
        if gap <= self._snap:
            self._value = self._target
        else:
            self._value += gap * self._easing
        return self._value
