"""
Unit tests for FileBlob upload candidates.
"""

from unittest.mock import MagicMock

import pytest

from imgshelf.models.blob import DEFAULT_MIME_TYPE, FileBlob, guess_mime_type


class TestGuessMimeType:
    """Test cases for MIME type guessing."""

    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("photo.jpg", "image/jpeg"),
            ("photo.JPEG", "image/jpeg"),
            ("photo.png", "image/png"),
            ("anim.gif", "image/gif"),
            ("noextension", DEFAULT_MIME_TYPE),
        ],
    )
    def test_guess(self, filename, expected):
        """Test MIME type guessed from the file name."""
        assert guess_mime_type(filename) == expected


class TestFileBlob:
    """Test cases for FileBlob constructors."""

    def test_from_bytes(self):
        """Test wrapping in-memory bytes."""
        blob = FileBlob.from_bytes("cat.png", b"12345")

        assert blob.name == "cat.png"
        assert blob.mime_type == "image/png"
        assert blob.size == 5
        assert blob.read() == b"12345"

    def test_from_bytes_explicit_type(self):
        """Test that an explicit type wins over the guess."""
        blob = FileBlob.from_bytes("cat.png", b"x", mime_type="image/gif")

        assert blob.mime_type == "image/gif"

    def test_from_path(self, tmp_path):
        """Test wrapping a file on disk."""
        path = tmp_path / "dog.jpg"
        path.write_bytes(b"jpeg-bytes")

        blob = FileBlob.from_path(path)

        assert blob.name == "dog.jpg"
        assert blob.mime_type == "image/jpeg"
        assert blob.size == 10
        assert blob.read() == b"jpeg-bytes"

    def test_from_path_missing_file(self, tmp_path):
        """Test that a missing file fails at construction."""
        with pytest.raises(OSError):
            FileBlob.from_path(tmp_path / "missing.png")

    def test_from_uploaded_file(self):
        """Test wrapping a Streamlit UploadedFile."""
        uploaded = MagicMock()
        uploaded.name = "bird.gif"
        uploaded.type = "image/gif"
        uploaded.size = 3
        uploaded.getvalue.return_value = b"GIF"

        blob = FileBlob.from_uploaded_file(uploaded)

        assert blob.name == "bird.gif"
        assert blob.mime_type == "image/gif"
        assert blob.size == 3
        assert blob.read() == b"GIF"

    def test_from_uploaded_file_without_type(self):
        """Test the type is guessed when the browser sends none."""
        uploaded = MagicMock()
        uploaded.name = "bird.png"
        uploaded.type = ""
        uploaded.size = 0

        assert FileBlob.from_uploaded_file(uploaded).mime_type == "image/png"
