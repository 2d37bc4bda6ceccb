"""Five-stage key generation pipeline."""

from collections.abc import Callable
from enum import IntEnum

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa

from sshkeygen.common.errors import (
    EncodingError,
    GenerationError,
    KeygenError,
    StageOrderError,
)
from sshkeygen.common.logging import get_logger
from sshkeygen.keys import catalog
from sshkeygen.keys.encoding import encode_private_key as _encode_private
from sshkeygen.keys.encoding import encode_public_key as _encode_public
from sshkeygen.keys.material import (
    EcdsaKeyMaterial,
    Ed25519KeyMaterial,
    KeyMaterial,
    RsaKeyMaterial,
)
from sshkeygen.keys.persistence import remove_quietly, write_atomic
from sshkeygen.session import Session

logger = get_logger(__name__)

PRIVATE_KEY_MODE = 0o600
PUBLIC_KEY_MODE = 0o644
RSA_PUBLIC_EXPONENT = 65537


class Stage(IntEnum):
    """Pipeline stages in execution order."""

    GENERATE_KEYPAIR = 1
    ENCODE_PRIVATE = 2
    ENCODE_PUBLIC = 3
    PERSIST_PRIVATE = 4
    PERSIST_PUBLIC = 5

    @property
    def next(self) -> "Stage | None":
        if self is Stage.PERSIST_PUBLIC:
            return None
        return Stage(self + 1)


STAGE_COUNT = len(Stage)


def _require(condition: bool, stage: Stage, missing: str) -> None:
    if not condition:
        raise StageOrderError(f"stage {stage.name.lower()} needs {missing} first")


def generate_keypair(session: Session) -> KeyMaterial:
    """
    Stage 1: generate key material for the bound algorithm.

    Raises:
        ValidationError: If the algorithm/size pair is unsupported
        GenerationError: If the library fails to produce a key
    """
    spec = session.algorithm
    _require(spec is not None, Stage.GENERATE_KEYPAIR, "a bound algorithm")
    assert spec is not None

    size = catalog.validate(spec.name, session.key_size)
    session.key_size = size

    try:
        material: KeyMaterial
        if spec.name == catalog.RSA:
            material = RsaKeyMaterial(
                rsa.generate_private_key(public_exponent=RSA_PUBLIC_EXPONENT, key_size=size)
            )
        elif spec.name == catalog.ED25519:
            material = Ed25519KeyMaterial(ed25519.Ed25519PrivateKey.generate())
        elif spec.name == catalog.ECDSA:
            material = EcdsaKeyMaterial(ec.generate_private_key(catalog.ecdsa_curve(size)))
        else:
            raise GenerationError(f"unsupported algorithm: {spec.name}")
    except (ValueError, UnsupportedAlgorithm) as e:
        raise GenerationError(f"failed to generate {spec.label(size)} key: {e}") from e

    session.key_material = material
    return material


def _checked_material(session: Session, stage: Stage) -> KeyMaterial:
    material = session.key_material
    _require(material is not None, stage, "generated key material")
    assert material is not None
    if session.algorithm is None or material.algorithm != session.algorithm.name:
        raise EncodingError(
            f"key material is {material.algorithm}, expected "
            f"{session.algorithm.name if session.algorithm else 'no algorithm'}"
        )
    return material


def encode_private_key(session: Session) -> bytes:
    """Stage 2: serialize the private key container."""
    material = _checked_material(session, Stage.ENCODE_PRIVATE)
    session.private_bytes = _encode_private(material)
    return session.private_bytes


def encode_public_key(session: Session) -> bytes:
    """Stage 3: render the authorized_keys line."""
    _require(session.private_bytes is not None, Stage.ENCODE_PUBLIC, "an encoded private key")
    material = _checked_material(session, Stage.ENCODE_PUBLIC)
    session.public_bytes = _encode_public(material, session.comment)
    return session.public_bytes


def persist_private_key(session: Session) -> None:
    """Stage 4: write the private key with mode 0600."""
    _require(session.public_bytes is not None, Stage.PERSIST_PRIVATE, "an encoded public key")
    assert session.private_bytes is not None
    assert session.private_path is not None
    write_atomic(session.private_path, session.private_bytes, PRIVATE_KEY_MODE)
    session.private_written = True


def persist_public_key(session: Session) -> None:
    """
    Stage 5: write the public key with mode 0644.

    If the write fails the private key written by stage 4 is removed so no
    orphan private key survives.
    """
    _require(session.private_written, Stage.PERSIST_PUBLIC, "a written private key")
    assert session.public_bytes is not None
    assert session.public_path is not None
    assert session.private_path is not None
    try:
        write_atomic(session.public_path, session.public_bytes, PUBLIC_KEY_MODE)
    except KeygenError:
        logger.info(
            "Public key write failed, rolling back private key",
            path=str(session.private_path),
        )
        if remove_quietly(session.private_path):
            session.private_written = False
        raise
    session.public_written = True


_STAGE_FUNCTIONS: dict[Stage, Callable[[Session], object]] = {
    Stage.GENERATE_KEYPAIR: generate_keypair,
    Stage.ENCODE_PRIVATE: encode_private_key,
    Stage.ENCODE_PUBLIC: encode_public_key,
    Stage.PERSIST_PRIVATE: persist_private_key,
    Stage.PERSIST_PUBLIC: persist_public_key,
}


def run_stage(session: Session, stage: Stage | int) -> None:
    """Run one stage against the session."""
    stage = Stage(stage)
    logger.debug("Running stage", stage=stage.name.lower())
    try:
        _STAGE_FUNCTIONS[stage](session)
    except KeygenError as e:
        logger.info("Stage failed", stage=stage.name.lower(), error=str(e))
        raise
    logger.info("Stage complete", stage=stage.name.lower())


def run_pipeline(
    session: Session,
    on_stage: Callable[[Stage], None] | None = None,
) -> None:
    """
    Run all five stages in order, stopping at the first failure.

    Args:
        session: Session with a bound algorithm and paths
        on_stage: Called after each successful stage
    """
    session.reset_artifacts()
    for stage in Stage:
        run_stage(session, stage)
        if on_stage is not None:
            on_stage(stage)
