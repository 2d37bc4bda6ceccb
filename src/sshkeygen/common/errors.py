"""Shared error types and exit codes."""


class ExitCode:
    OK = 0
    FAILURE = 1
    OVERWRITE_REFUSED = 2


class KeygenError(Exception):
    """Base class for key generation failures."""

    pass


class ValidationError(KeygenError):
    """Unsupported algorithm or key size combination."""

    pass


class GenerationError(KeygenError):
    """Key material could not be generated."""

    pass


class EncodingError(KeygenError):
    """Key material could not be serialized."""

    pass


class PersistenceError(KeygenError):
    """A key file could not be written."""

    pass


class StageOrderError(KeygenError):
    """A pipeline stage ran before its predecessor produced an artifact."""

    pass


class OverwriteRefused(KeygenError):
    """Key files already exist and overwriting was not requested."""

    def __init__(self, path: str):
        super().__init__(f"{path} already exists (use -force to overwrite)")
        self.path = path
