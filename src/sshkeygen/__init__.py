"""
sshkeygen: interactive and one-shot SSH key pair generator.

Generates RSA, ED25519 and ECDSA key pairs through a five-stage pipeline
with atomic, all-or-nothing writes of the private and public key files.
"""

__version__ = "3.0.0"
__author__ = "sshkeygen contributors"

APP_TITLE = "SSH KeyGen"
