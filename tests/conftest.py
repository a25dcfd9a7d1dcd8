"""
Pytest configuration and fixtures for imgshelf tests.
"""

import io
import random
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from PIL import Image

from imgshelf.config import get_config
from imgshelf.models.blob import FileBlob
from imgshelf.models.database import KeyValueStore, create_database
from imgshelf.services.gallery import GallerySession


def make_image_bytes(image_format: str = "PNG", size: tuple[int, int] = (8, 8), color: str = "red") -> bytes:
    """Encode a small solid-color image with Pillow."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=image_format)
    return buffer.getvalue()


def make_noise_png(target_bytes: int, seed: int = 0) -> bytes:
    """
    Encode a PNG of random pixels at least target_bytes long.

    Random pixels do not compress, so the file size tracks the pixel count.
    """
    side = int((target_bytes / 3) ** 0.5) + 1
    pixels = random.Random(seed).randbytes(side * side * 3)
    buffer = io.BytesIO()
    Image.frombytes("RGB", (side, side), pixels).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Point configuration at a per-test database and reset cached config."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("IMGSHELF_DB_PATH", str(tmp_path / "env" / "imgshelf.duckdb"))
    monkeypatch.delenv("IMGSHELF_PASSWORD", raising=False)
    monkeypatch.delenv("UPLOAD_READ_WORKERS", raising=False)
    get_config().clear_cache()
    yield
    get_config().clear_cache()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Location of a fresh DuckDB file."""
    return tmp_path / "gallery.duckdb"


@pytest.fixture
def kv_store(db_path: Path) -> Generator[KeyValueStore, None, None]:
    """Key-value store on a fresh database file."""
    store = create_database(str(db_path))
    yield store
    store.manager.close()


@pytest.fixture
def session_storage() -> dict:
    """Stand-in for a browser session's state."""
    return {}


@pytest.fixture
def gallery(kv_store: KeyValueStore, session_storage: dict) -> GallerySession:
    """Controller on a fresh database, nobody logged in."""
    return GallerySession(kv_store, session_storage=session_storage, read_workers=4)


@pytest.fixture
def logged_in_gallery(gallery: GallerySession) -> GallerySession:
    """Controller with alice registered and logged in."""
    gallery.register("alice", "pw1", "pw1")
    gallery.login("alice", "pw1")
    return gallery


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


@pytest.fixture
def blob_factory() -> Callable[..., FileBlob]:
    """Build upload candidates holding real, decodable images."""

    def _make(name: str = "photo.png", image_format: str = "PNG", mime_type: str | None = None) -> FileBlob:
        return FileBlob.from_bytes(name, make_image_bytes(image_format), mime_type=mime_type)

    return _make
