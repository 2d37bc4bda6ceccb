"""Common utilities for sshkeygen."""

from sshkeygen.common.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
