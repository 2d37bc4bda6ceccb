"""Tests for the algorithm catalog."""

from pathlib import Path

import pytest
from cryptography.hazmat.primitives.asymmetric import ec

from sshkeygen.common.errors import ValidationError
from sshkeygen.keys import catalog


class TestListAlgorithms:
    """Test the algorithm registry."""

    def test_stable_order(self):
        """Algorithms are listed RSA, ED25519, ECDSA."""
        names = [spec.name for spec in catalog.list_algorithms()]
        assert names == ["RSA", "ED25519", "ECDSA"]

    def test_default_sizes_are_allowed(self):
        """Each default size is a member of the allowed set."""
        for spec in catalog.list_algorithms():
            assert spec.default_size in spec.key_sizes

    def test_defaults(self):
        """Default sizes match the supported menu."""
        sizes = {spec.name: spec.default_size for spec in catalog.list_algorithms()}
        assert sizes == {"RSA": 4096, "ED25519": 256, "ECDSA": 256}

    def test_get_algorithm_case_insensitive(self):
        """Lookup ignores case."""
        assert catalog.get_algorithm("ecdsa").name == "ECDSA"
        assert catalog.get_algorithm("Ed25519").name == "ED25519"

    def test_get_unknown_algorithm(self):
        """Unknown algorithms are rejected."""
        with pytest.raises(ValidationError, match="unsupported algorithm"):
            catalog.get_algorithm("dsa")


class TestValidate:
    """Test key size validation."""

    @pytest.mark.parametrize("size", [2048, 3072, 4096, 8192])
    def test_rsa_allowed_sizes(self, size):
        assert catalog.validate("RSA", size) == size

    @pytest.mark.parametrize("size", [1024, 2047, 5000])
    def test_rsa_rejected_sizes(self, size):
        with pytest.raises(ValidationError, match="RSA key size"):
            catalog.validate("RSA", size)

    @pytest.mark.parametrize("size", [0, 256, 512, 4096])
    def test_ed25519_size_is_overridden(self, size):
        """ED25519 ignores the requested size instead of rejecting it."""
        assert catalog.validate("ED25519", size) == 256

    def test_ecdsa_512_rejected(self):
        """512 is not a NIST curve size."""
        with pytest.raises(ValidationError, match="ECDSA key size: 512"):
            catalog.validate("ECDSA", 512)


class TestCurvesAndPaths:
    """Test curve selection and default paths."""

    @pytest.mark.parametrize(
        "size,curve",
        [(256, ec.SECP256R1), (384, ec.SECP384R1), (521, ec.SECP521R1)],
    )
    def test_ecdsa_curve(self, size, curve):
        assert isinstance(catalog.ecdsa_curve(size), curve)

    def test_ecdsa_curve_invalid(self):
        with pytest.raises(ValidationError):
            catalog.ecdsa_curve(224)

    def test_default_paths(self, tmp_path):
        """Default filenames follow ssh-keygen naming."""
        expected = {"RSA": "id_rsa", "ED25519": "id_ed25519", "ECDSA": "id_ecdsa"}
        for spec in catalog.list_algorithms():
            private_path, public_path = catalog.default_paths(spec, tmp_path)
            assert private_path == tmp_path / expected[spec.name]
            assert public_path == tmp_path / f"{expected[spec.name]}.pub"

    def test_public_path_for_keeps_suffix(self):
        """The .pub suffix is appended, not substituted."""
        assert catalog.public_path_for("keys/deploy.key") == Path("keys/deploy.key.pub")

    def test_label(self):
        ecdsa = catalog.get_algorithm("ECDSA")
        assert ecdsa.label(384) == "ECDSA P-384"
        assert catalog.get_algorithm("RSA").label(4096) == "RSA"
