"""Allow ``python -m sshkeygen``."""

from sshkeygen.cli import main

main()
