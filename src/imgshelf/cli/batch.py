"""
Command line access to a local gallery.

Tasks log in with the given credentials, perform one operation and log out
again. Run them through the ``imgshelf-batch`` program, for example::

    imgshelf-batch upload --directory ./photos --username alice --password pw1
"""

import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import structlog
from dotenv import load_dotenv
from invoke import Collection, Context, Exit, Program, task

from imgshelf import __version__
from imgshelf.config import get_config, get_database_path
from imgshelf.errors import GalleryError
from imgshelf.logging_config import configure_structured_logging
from imgshelf.models.blob import FileBlob
from imgshelf.models.database import create_database
from imgshelf.services.gallery import GallerySession

logger = structlog.get_logger()

SUPPORTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif"}


def _load_env(env_file: str) -> None:
    loaded = os.path.exists(env_file) and load_dotenv(dotenv_path=env_file)
    get_config().clear_cache()
    configure_structured_logging()
    logger.debug("env_file_processed", env_file=env_file, loaded=bool(loaded))


def _resolve_password(password: str | None) -> str:
    return password or os.getenv("IMGSHELF_PASSWORD", "")


@contextmanager
def _open_gallery(env_file: str) -> Iterator[GallerySession]:
    """Open the configured database for the duration of one task."""
    _load_env(env_file)
    kv_store = create_database(get_database_path())
    try:
        yield GallerySession(kv_store)
    finally:
        kv_store.manager.close()


@contextmanager
def _logged_in(env_file: str, username: str, password: str | None) -> Iterator[GallerySession]:
    """Log in for the duration of one task and log out afterwards."""
    with _open_gallery(env_file) as gallery:
        try:
            gallery.login(username, _resolve_password(password))
        except GalleryError as e:
            raise Exit(f"Login failed: {e.user_message}", code=1) from e
        try:
            yield gallery
        finally:
            gallery.logout(confirm=True)


def find_image_files(directory: Path, recursive: bool = False) -> list[Path]:
    """List files with a supported image extension, sorted by path."""
    pattern = "**/*" if recursive else "*"
    return sorted(
        path for path in directory.glob(pattern) if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS
    )


@task
def register(c: Context, username: str, password: str = "", confirm: str = "", env_file: str = ".env"):
    """
    Create a gallery account.

    Args:
        c (Context): Invoke context.
        username (str): Account to create.
        password (str): Password (falls back to IMGSHELF_PASSWORD).
        confirm (str): Password confirmation (defaults to the password).
        env_file (str): Path to the environment file. Default is '.env'.
    """
    password = _resolve_password(password)
    with _open_gallery(env_file) as gallery:
        try:
            gallery.register(username, password, confirm or password)
        except GalleryError as e:
            raise Exit(f"Registration failed: {e.user_message}", code=1) from e
    print(f"Account '{username.strip()}' created.")


@task
def upload(
    c: Context,
    directory: str,
    username: str,
    password: str = "",
    env_file: str = ".env",
    recursive: bool = False,
    dry_run: bool = False,
):
    """
    Upload images from a local directory in one batch.

    Args:
        c (Context): Invoke context.
        directory (str): Path to the directory containing images.
        username (str): Gallery account to upload into.
        password (str): Password (falls back to IMGSHELF_PASSWORD).
        env_file (str): Path to the environment file. Default is '.env'.
        recursive (bool): Search for images in subdirectories. Default is False.
        dry_run (bool): If True, lists files to be processed without uploading. Default is False.
    """
    source = Path(directory)
    if not source.is_dir():
        raise Exit(f"Directory not found: {directory}", code=1)

    image_files = find_image_files(source, recursive)
    if not image_files:
        logger.warning("no_image_files_found", directory=directory)
        print("No image files found.")
        return

    if dry_run:
        print("\n--- Dry Run Mode: Files to be processed ---")
        for file_path in image_files:
            print(f"- {file_path}")
        print("--- End of Dry Run ---")
        return

    with _logged_in(env_file, username, password) as gallery:
        try:
            result = gallery.upload([FileBlob.from_path(path) for path in image_files])
        except GalleryError as e:
            raise Exit(f"Upload failed: {e.user_message}", code=1) from e

    for issue in result.skipped + result.failed:
        print(f"Skipped {issue.filename}: {issue.message}")
    print(f"\nBatch upload complete. Added: {len(result.added)}, Skipped: {len(result.skipped) + len(result.failed)}")


@task(name="list")
def list_images(c: Context, username: str, password: str = "", env_file: str = ".env"):
    """
    Print the user's images, most recent first.

    Args:
        c (Context): Invoke context.
        username (str): Gallery account.
        password (str): Password (falls back to IMGSHELF_PASSWORD).
        env_file (str): Path to the environment file. Default is '.env'.
    """
    with _logged_in(env_file, username, password) as gallery:
        images = gallery.images

    if not images:
        print("No images.")
        return
    for record in images:
        print(f"{record.id}  {record.uploaded_at.isoformat()}  {record.name}")


@task
def export(c: Context, username: str, password: str = "", output: str = "", env_file: str = ".env"):
    """
    Write the user's collection to a JSON export file.

    Args:
        c (Context): Invoke context.
        username (str): Gallery account.
        password (str): Password (falls back to IMGSHELF_PASSWORD).
        output (str): Target file. Defaults to gallery_<user>_<epoch-ms>.json in the current directory.
        env_file (str): Path to the environment file. Default is '.env'.
    """
    with _logged_in(env_file, username, password) as gallery:
        target = Path(output or gallery.export_filename())
        target.write_text(gallery.export_json(), encoding="utf-8")

    print(f"Exported to {target}")


namespace = Collection(register, upload, list_images, export)
program = Program(namespace=namespace, version=__version__, name="imgshelf-batch", binary="imgshelf-batch")
