"""Private key containers and OpenSSH authorized_keys lines."""

from cryptography.hazmat.primitives import serialization

from sshkeygen.common.errors import EncodingError
from sshkeygen.keys.material import (
    EcdsaKeyMaterial,
    Ed25519KeyMaterial,
    KeyMaterial,
    RsaKeyMaterial,
)


def encode_private_key(material: KeyMaterial) -> bytes:
    """
    Serialize key material to an unencrypted PEM container.

    RSA keys use the PKCS#1 "RSA PRIVATE KEY" container, ED25519 and ECDSA
    keys use the PKCS#8 "PRIVATE KEY" container.

    Raises:
        EncodingError: If serialization fails
    """
    if isinstance(material, RsaKeyMaterial):
        private_format = serialization.PrivateFormat.TraditionalOpenSSL
    elif isinstance(material, (Ed25519KeyMaterial, EcdsaKeyMaterial)):
        private_format = serialization.PrivateFormat.PKCS8
    else:
        raise EncodingError(f"unsupported key material: {type(material).__name__}")

    try:
        return material.private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=private_format,
            encryption_algorithm=serialization.NoEncryption(),
        )
    except (ValueError, TypeError) as e:
        raise EncodingError(f"failed to encode {material.algorithm} private key: {e}") from e


def encode_public_key(material: KeyMaterial, comment: str = "") -> bytes:
    """
    Render the public half of key material as one authorized_keys line.

    The line is ``<type> <base64>`` followed by `` <comment>`` when a
    comment is given, and always ends with a newline.

    Raises:
        EncodingError: If serialization fails
    """
    if not isinstance(material, (RsaKeyMaterial, Ed25519KeyMaterial, EcdsaKeyMaterial)):
        raise EncodingError(f"unsupported key material: {type(material).__name__}")

    try:
        line = material.private_key.public_key().public_bytes(
            encoding=serialization.Encoding.OpenSSH,
            format=serialization.PublicFormat.OpenSSH,
        )
    except (ValueError, TypeError) as e:
        raise EncodingError(f"failed to encode {material.algorithm} public key: {e}") from e

    if comment:
        line += b" " + comment.encode("utf-8")
    return line + b"\n"
