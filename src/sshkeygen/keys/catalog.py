"""Registry of supported key algorithms and their size constraints."""

from dataclasses import dataclass
from pathlib import Path

from cryptography.hazmat.primitives.asymmetric import ec

from sshkeygen.common.errors import ValidationError

RSA = "RSA"
ED25519 = "ED25519"
ECDSA = "ECDSA"


@dataclass(frozen=True)
class AlgorithmSpec:
    """A supported key algorithm."""

    name: str
    description: str
    key_sizes: tuple[int, ...]
    default_size: int
    default_filename: str

    def label(self, size: int) -> str:
        """Short human label such as ``ECDSA P-384``."""
        if self.name == ECDSA:
            return f"{self.name} P-{size}"
        return self.name


_ALGORITHMS: tuple[AlgorithmSpec, ...] = (
    AlgorithmSpec(
        name=RSA,
        description="RSA - Rivest-Shamir-Adleman (Most compatible)",
        key_sizes=(2048, 3072, 4096, 8192),
        default_size=4096,
        default_filename="id_rsa",
    ),
    AlgorithmSpec(
        name=ED25519,
        description="ED25519 - Edwards-curve Digital Signature Algorithm (Modern, Fast)",
        key_sizes=(256,),
        default_size=256,
        default_filename="id_ed25519",
    ),
    AlgorithmSpec(
        name=ECDSA,
        description="ECDSA - Elliptic Curve Digital Signature Algorithm (Modern, Efficient)",
        key_sizes=(256, 384, 521),
        default_size=256,
        default_filename="id_ecdsa",
    ),
)

_ECDSA_CURVES: dict[int, type[ec.EllipticCurve]] = {
    256: ec.SECP256R1,
    384: ec.SECP384R1,
    521: ec.SECP521R1,
}


def list_algorithms() -> tuple[AlgorithmSpec, ...]:
    """Return the supported algorithms in menu order."""
    return _ALGORITHMS


def get_algorithm(name: str) -> AlgorithmSpec:
    """
    Look up an algorithm by name (case-insensitive).

    Raises:
        ValidationError: If the algorithm is not supported
    """
    wanted = name.upper()
    for spec in _ALGORITHMS:
        if spec.name == wanted:
            return spec
    raise ValidationError(f"unsupported algorithm: {name}")


def validate(name: str, size: int) -> int:
    """
    Check a key size against an algorithm's allowed sizes.

    ED25519 has no size parameter: any requested size is replaced by 256.

    Returns:
        The effective key size

    Raises:
        ValidationError: If the algorithm or size is not supported
    """
    spec = get_algorithm(name)
    if spec.name == ED25519:
        return spec.default_size
    if size not in spec.key_sizes:
        allowed = ", ".join(str(s) for s in spec.key_sizes)
        raise ValidationError(
            f"unsupported {spec.name} key size: {size} (allowed: {allowed})"
        )
    return size


def ecdsa_curve(size: int) -> ec.EllipticCurve:
    """Return the NIST curve for an ECDSA key size."""
    curve = _ECDSA_CURVES.get(size)
    if curve is None:
        raise ValidationError(f"unsupported ECDSA key size: {size} (use 256, 384, or 521)")
    return curve()


def default_paths(spec: AlgorithmSpec, directory: str | Path = ".") -> tuple[Path, Path]:
    """Derive the default private and public key paths for an algorithm."""
    private_path = Path(directory) / spec.default_filename
    return private_path, public_path_for(private_path)


def public_path_for(private_path: str | Path) -> Path:
    """Public key path paired with a private key path."""
    private_path = Path(private_path)
    return private_path.with_name(private_path.name + ".pub")
