"""Generated key material, one variant per supported algorithm."""

from dataclasses import dataclass
from typing import Union

from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa

from sshkeygen.keys.catalog import ECDSA, ED25519, RSA


@dataclass(frozen=True)
class RsaKeyMaterial:
    private_key: rsa.RSAPrivateKey

    @property
    def algorithm(self) -> str:
        return RSA

    @property
    def key_size(self) -> int:
        return self.private_key.key_size


@dataclass(frozen=True)
class Ed25519KeyMaterial:
    private_key: ed25519.Ed25519PrivateKey

    @property
    def algorithm(self) -> str:
        return ED25519

    @property
    def key_size(self) -> int:
        return 256


@dataclass(frozen=True)
class EcdsaKeyMaterial:
    private_key: ec.EllipticCurvePrivateKey

    @property
    def algorithm(self) -> str:
        return ECDSA

    @property
    def key_size(self) -> int:
        return self.private_key.curve.key_size


KeyMaterial = Union[RsaKeyMaterial, Ed25519KeyMaterial, EcdsaKeyMaterial]
