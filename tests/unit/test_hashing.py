"""
Unit tests for hash engines.
"""

import hashlib

import pytest

from merkle_tree.exceptions import UnsupportedHashAlgorithmError
from merkle_tree.hashing import (
    DEFAULT_ALGORITHM,
    DEFAULT_ENGINE,
    SUPPORTED_ALGORITHMS,
    HashEngine,
    HashlibEngine,
    combine,
    create_hash_engine,
    hash_data,
)


class TestHashlibEngine:
    """Test the hashlib-backed engine."""

    def test_default_is_sha3_256(self):
        """Test the default engine is SHA3-256 with 32-byte digests."""
        assert DEFAULT_ALGORITHM == "sha3_256"
        assert DEFAULT_ENGINE.name == "sha3_256"
        assert DEFAULT_ENGINE.digest_size == 32

    def test_hash_matches_hashlib(self):
        engine = HashlibEngine("sha256")

        assert engine.hash(b"abc") == hashlib.sha256(b"abc").digest()

    def test_combine_is_hash_of_concatenation(self):
        """Test combine(a, b) == hash(a || b)."""
        a, b = hash_data(b"a"), hash_data(b"b")

        assert combine(a, b) == hashlib.sha3_256(a + b).digest()

    def test_combine_is_order_sensitive(self):
        a, b = hash_data(b"a"), hash_data(b"b")

        assert combine(a, b) != combine(b, a)

    def test_name_is_normalized(self):
        """Test algorithm names are lowercased with dashes as underscores."""
        engine = HashlibEngine("SHA3-256")

        assert engine.name == "sha3_256"
        assert engine == DEFAULT_ENGINE

    def test_digest_size_from_algorithm(self):
        assert HashlibEngine("sha512").digest_size == 64
        assert HashlibEngine("blake2s").digest_size == 32

    def test_unknown_algorithm(self):
        with pytest.raises(UnsupportedHashAlgorithmError, match="Unsupported"):
            HashlibEngine("not-a-hash")

    def test_variable_length_algorithm_rejected(self):
        """Test shake algorithms are rejected."""
        with pytest.raises(UnsupportedHashAlgorithmError, match="fixed output size"):
            HashlibEngine("shake_128")

    def test_engines_compare_by_algorithm(self):
        assert HashlibEngine("sha256") == HashlibEngine("sha256")
        assert HashlibEngine("sha256") != HashlibEngine("sha512")
        assert hash(HashlibEngine("sha256")) == hash(HashlibEngine("sha256"))

    def test_repr(self):
        assert repr(HashlibEngine("sha256")) == "HashlibEngine('sha256')"


class TestCustomEngine:
    """Test subclassing HashEngine."""

    def test_subclass_gets_combine(self):
        class XorEngine(HashEngine):
            name = "xor"
            digest_size = 1

            def hash(self, data):
                value = 0
                for byte in data:
                    value ^= byte
                return bytes([value])

        engine = XorEngine()

        assert engine.combine(b"\x0f", b"\xf0") == b"\xff"

    def test_abstract_engine_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            HashEngine()


class TestCreateHashEngine:
    """Test the engine factory."""

    @pytest.mark.parametrize("name", SUPPORTED_ALGORITHMS)
    def test_supported_algorithms(self, name):
        engine = create_hash_engine(name)

        assert engine.name == name
        assert len(engine.hash(b"x")) == engine.digest_size

    def test_default(self):
        assert create_hash_engine() == DEFAULT_ENGINE

    def test_unsupported_algorithm(self):
        """Test algorithms hashlib knows but the factory does not accept."""
        with pytest.raises(UnsupportedHashAlgorithmError, match="Supported algorithms"):
            create_hash_engine("md5")
