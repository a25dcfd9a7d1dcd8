"""
Unit tests for password hashing.
"""

from imgshelf.services.hashing import digest, is_digest


class TestDigest:
    """Test cases for digest()."""

    def test_known_vector(self):
        """Test against the published SHA-256 of 'abc'."""
        assert digest("abc") == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"

    def test_deterministic(self):
        """Test that equal inputs give equal output."""
        assert digest("pw1") == digest("pw1")

    def test_different_inputs_differ(self):
        """Test that different passwords give different digests."""
        assert digest("pw1") != digest("pw2")
        assert digest("Password") != digest("password")

    def test_format(self):
        """Test output is 64 lowercase hex characters."""
        value = digest("unicode pässwörd ✓")

        assert len(value) == 64
        assert value == value.lower()
        assert is_digest(value)

    def test_empty_password(self):
        """Test empty input still hashes."""
        assert digest("") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


class TestIsDigest:
    """Test cases for digest shape checks."""

    def test_rejects_wrong_shapes(self):
        """Test values that are not stored digests."""
        assert not is_digest("abc")
        assert not is_digest("A" * 64)
        assert not is_digest(None)
        assert not is_digest(123)
