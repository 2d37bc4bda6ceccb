"""Mutable state of one key generation run."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import structlog

from sshkeygen.common.errors import ValidationError
from sshkeygen.keys import catalog
from sshkeygen.keys.catalog import AlgorithmSpec
from sshkeygen.keys.material import KeyMaterial


class Phase(str, Enum):
    """Lifecycle of an interactive session."""

    ALGORITHM_SELECTION = "algorithm_selection"
    CONFIRM = "confirm"
    GENERATING = "generating"
    PROGRESS_COMPLETE = "progress_complete"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (Phase.COMPLETE, Phase.ERROR)


@dataclass
class Session:
    """
    State for a single run, mutated in place by the controller and stages.

    Only the two key files outlive the process; the session itself is never
    persisted.
    """

    algorithm: AlgorithmSpec | None = None
    key_size: int = 0
    comment: str = ""
    private_path: Path | None = None
    public_path: Path | None = None
    phase: Phase = Phase.ALGORITHM_SELECTION
    message: str = ""
    progress: float = 0.0
    cursor: int = 0
    pending_stage: int | None = None
    # Key files found on disk when the algorithm was selected
    existing_paths: tuple[Path, ...] = ()

    # Stage artifacts
    key_material: KeyMaterial | None = field(default=None, repr=False)
    private_bytes: bytes | None = field(default=None, repr=False)
    public_bytes: bytes | None = field(default=None, repr=False)
    private_written: bool = False
    public_written: bool = False

    def bind(
        self,
        spec: AlgorithmSpec,
        key_size: int | None = None,
        private_path: str | Path | None = None,
        output_dir: str | Path = ".",
        comment: str | None = None,
    ) -> None:
        """
        Bind an algorithm, a validated key size and the output paths.

        Args:
            spec: Algorithm to generate
            key_size: Requested size (defaults to the algorithm default)
            private_path: Explicit private key path (public gets ``.pub``)
            output_dir: Directory for the default filenames
            comment: Public key comment, left unchanged when None

        Raises:
            ValidationError: If the size or comment is not acceptable
        """
        size = catalog.validate(
            spec.name, spec.default_size if key_size is None else key_size
        )
        if comment is not None:
            if "\n" in comment or "\r" in comment:
                raise ValidationError("key comment must be a single line")
            self.comment = comment

        if private_path is None:
            self.private_path, self.public_path = catalog.default_paths(spec, output_dir)
        else:
            self.private_path = Path(private_path)
            self.public_path = catalog.public_path_for(self.private_path)

        self.algorithm = spec
        self.key_size = size
        self.reset_artifacts()
        structlog.contextvars.bind_contextvars(algorithm=spec.name, key_size=size)

    def reset_artifacts(self) -> None:
        """Forget the outputs of any previous pipeline run."""
        self.key_material = None
        self.private_bytes = None
        self.public_bytes = None
        self.private_written = False
        self.public_written = False

    @property
    def description(self) -> str:
        """Human description of the key being generated."""
        if self.algorithm is None:
            return "key"
        if self.algorithm.name == catalog.RSA:
            return f"{self.key_size}-bit {self.algorithm.name} key"
        return f"{self.algorithm.label(self.key_size)} key"
