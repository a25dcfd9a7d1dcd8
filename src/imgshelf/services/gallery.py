"""
Gallery session controller for imgshelf application.

GallerySession ties the credential store, image store and session tracker
together and is the only entry point front ends are expected to use. It is
a small state machine with two states:

- Anonymous: no user, no working collection, no selection
- Authenticated(username): the user's collection is loaded into working
  state and the session pointer names that user

Every mutation of the working collection is persisted immediately as a
whole partition. Stores are process-local and writes are not coordinated
between independent processes, so two instances writing the same
partition resolve as last writer wins.
"""

import json
import time
from collections.abc import Callable, Iterable, MutableMapping
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from ..config import get_upload_read_workers
from ..errors import AuthError, ConflictError, NotFoundError, ReadError, ValidationError
from ..logging_config import get_logger, log_performance, log_security_event, log_user_action
from ..models.blob import FileBlob
from ..models.database import KeyValueStore
from ..models.image import ImageRecord, as_utc, to_epoch_millis
from .credentials import CredentialStore
from .hashing import digest
from .image_reader import ImageReader, LoadedImage, get_image_reader
from .images import ImageStore
from .session import SessionTracker

logger = get_logger(__name__)

Confirmation = bool | Callable[[str], bool]


@dataclass
class GallerySessionState:
    """Working state of one gallery session."""

    username: str | None = None
    images: list[ImageRecord] = field(default_factory=list)
    selection: int | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.username is not None


@dataclass(frozen=True)
class FileIssue:
    """A file that was skipped or could not be read during an upload."""

    filename: str
    code: str
    message: str


@dataclass
class UploadResult:
    """Outcome of one upload batch."""

    added: list[ImageRecord] = field(default_factory=list)
    skipped: list[FileIssue] = field(default_factory=list)
    failed: list[FileIssue] = field(default_factory=list)

    @property
    def persisted(self) -> bool:
        return bool(self.added)


class GallerySession:
    """Login, registration and collection management for one runtime session."""

    def __init__(
        self,
        kv_store: KeyValueStore,
        session_storage: MutableMapping[str, Any] | None = None,
        image_reader: ImageReader | None = None,
        read_workers: int | None = None,
    ) -> None:
        """
        Initialize the controller and make sure the bootstrap account exists.

        Args:
            kv_store: Durable store shared by credentials and collections
            session_storage: Per-session mapping for the session pointer
            image_reader: Validator/reader for uploads
            read_workers: Thread count for concurrent upload reads
        """
        self.credentials = CredentialStore(kv_store)
        self.image_store = ImageStore(kv_store)
        self.session_tracker = SessionTracker(session_storage)
        self.image_reader = image_reader or get_image_reader()
        self.read_workers = read_workers or get_upload_read_workers()
        self.state = GallerySessionState()

        self.credentials.ensure_default_account()

    # State inspection

    @property
    def is_authenticated(self) -> bool:
        return self.state.is_authenticated

    @property
    def current_user(self) -> str | None:
        return self.state.username

    @property
    def images(self) -> list[ImageRecord]:
        """Copy of the working collection, most recent first."""
        return list(self.state.images)

    @property
    def selection(self) -> int | None:
        return self.state.selection

    # Account operations

    def register(self, username: str, password: str, confirm: str) -> None:
        """
        Create an account. Registration does not log the user in.

        Args:
            username: Requested username (surrounding whitespace is ignored)
            password: Password
            confirm: Password repeated

        Raises:
            ValidationError: If a field is empty or the passwords differ
            ConflictError: If the username is already taken
        """
        username = username.strip()
        if not username or not password:
            raise ValidationError(
                "Username and password are required",
                code="missing_credentials",
                user_message="Provide username and password.",
            )
        if password != confirm:
            raise ValidationError(
                "Password confirmation does not match",
                code="password_mismatch",
                user_message="Passwords do not match.",
                details={"username": username},
            )

        users = self.credentials.load()
        if username in users:
            raise ConflictError(
                f"Username '{username}' already exists",
                code="username_taken",
                user_message="Username already exists.",
                details={"username": username},
            )

        users[username] = digest(password)
        self.credentials.save(users)
        self.image_store.save_for(username, [])
        log_user_action(username, "register")

    def login(self, username: str, password: str) -> None:
        """
        Authenticate and load the user's collection.

        Raises:
            ValidationError: If a field is empty
            NotFoundError: If the username is unknown
            AuthError: If the password is wrong
        """
        username = username.strip()
        if not username or not password:
            raise ValidationError(
                "Username and password are required",
                code="missing_credentials",
                user_message="Provide username and password.",
            )

        users = self.credentials.load()
        if username not in users:
            raise NotFoundError(
                f"No account for '{username}'",
                code="user_not_found",
                user_message="No such user.",
                details={"username": username},
            )
        if digest(password) != users[username]:
            raise AuthError(
                f"Incorrect password for '{username}'",
                code="invalid_password",
                user_message="Incorrect password.",
                details={"username": username},
            )

        self._enter_authenticated(username)
        log_user_action(username, "login", image_count=len(self.state.images))

    def logout(self, *, confirm: Confirmation) -> bool:
        """
        End the session after explicit confirmation.

        Args:
            confirm: True/False, or a callable asked with a prompt

        Returns:
            bool: True if logged out, False if the confirmation was declined

        Raises:
            AuthError: If nobody is logged in
        """
        username = self._require_authenticated("logout")
        if not self._confirmed(confirm, "Log out?"):
            logger.debug("logout_declined", username=username)
            return False

        self.session_tracker.clear()
        self.state = GallerySessionState()
        log_user_action(username, "logout")
        return True

    def restore_session(self) -> str | None:
        """
        Resume the session named by the session pointer.

        A pointer naming an unknown account is discarded and the session
        stays Anonymous; this never raises for stale or malformed pointers.

        Returns:
            The restored username, or None
        """
        username = self.session_tracker.restore()
        if username is not None and self.credentials.exists(username):
            self._enter_authenticated(username)
            log_user_action(username, "session_restored", image_count=len(self.state.images))
            return username

        if self.session_tracker.has_pointer():
            logger.info("stale_session_pointer_discarded", username=username)
            self.session_tracker.clear()
        self.state = GallerySessionState()
        return None

    # Collection operations

    def upload(self, files: Iterable[FileBlob]) -> UploadResult:
        """
        Validate, read and add files to the collection.

        Each file is checked on its own; rejected files are skipped without
        affecting the others. Accepted files are read concurrently, and only
        once every read has settled are the new records prepended (in
        completion order) and the collection persisted, once.

        Args:
            files: Candidate files

        Returns:
            UploadResult describing added, skipped and failed files

        Raises:
            AuthError: If nobody is logged in
            ReadError: If files were accepted but none of them could be read
        """
        username = self._require_authenticated("upload")
        started = time.perf_counter()
        result = UploadResult()

        accepted: list[FileBlob] = []
        for blob in files:
            try:
                self.image_reader.validate(blob)
            except ValidationError as e:
                logger.warning("upload_file_skipped", username=username, filename=blob.name, reason=e.code)
                result.skipped.append(FileIssue(filename=blob.name, code=e.code, message=e.user_message))
                continue
            accepted.append(blob)

        if not accepted:
            return result

        loaded = self._read_concurrently(accepted, result)
        if not loaded:
            raise ReadError(
                f"None of the {len(accepted)} accepted files could be read",
                code="all_reads_failed",
                user_message="Error reading files.",
                details={"username": username, "filenames": [blob.name for blob in accepted]},
            )

        uploaded_at = datetime.now(UTC)
        for item in loaded:
            record = ImageRecord.create_new(name=item.name, payload=item.payload, uploaded_at=uploaded_at)
            self.state.images.insert(0, record)
            result.added.append(record)

        if self.state.selection is not None:
            self.state.selection += len(loaded)

        self.image_store.save_for(username, self.state.images)

        log_user_action(
            username,
            "upload",
            added=len(result.added),
            skipped=len(result.skipped),
            failed=len(result.failed),
        )
        log_performance("upload_batch", time.perf_counter() - started, username=username, file_count=len(accepted))
        return result

    def _read_concurrently(self, blobs: list[FileBlob], result: UploadResult) -> list[LoadedImage]:
        """Read blobs on a thread pool; returns successes in completion order after all reads settle."""
        loaded: list[LoadedImage] = []
        with ThreadPoolExecutor(max_workers=min(self.read_workers, len(blobs))) as executor:
            futures = {executor.submit(self.image_reader.read, blob): blob for blob in blobs}
            for future in as_completed(futures):
                blob = futures[future]
                try:
                    loaded.append(future.result())
                except ReadError as e:
                    logger.warning("upload_file_read_failed", filename=blob.name, reason=e.code)
                    result.failed.append(FileIssue(filename=blob.name, code=e.code, message=e.user_message))
        return loaded

    def delete_image(self, target: int | str | None = None, *, confirm: Confirmation) -> ImageRecord | None:
        """
        Remove one image from the collection after explicit confirmation.

        Args:
            target: Index, record id, or None for the current selection
            confirm: True/False, or a callable asked with a prompt

        Returns:
            The removed record, or None if the confirmation was declined

        Raises:
            AuthError: If nobody is logged in
            NotFoundError: If the target does not resolve to a record
        """
        username = self._require_authenticated("delete_image")
        index = self._resolve_target(target)

        if not self._confirmed(confirm, "Delete this image?"):
            logger.debug("delete_declined", username=username, index=index)
            return None

        removed = self.state.images.pop(index)
        self.image_store.save_for(username, self.state.images)

        selection = self.state.selection
        if not self.state.images:
            self.state.selection = None
        elif selection is not None:
            if selection == index:
                self.state.selection = min(index, len(self.state.images) - 1)
            elif selection > index:
                self.state.selection = selection - 1

        log_user_action(username, "delete_image", image_id=removed.id, remaining=len(self.state.images))
        return removed

    def _resolve_target(self, target: int | str | None) -> int:
        images = self.state.images

        if target is None:
            if self.state.selection is None or not 0 <= self.state.selection < len(images):
                raise NotFoundError("No image is selected", code="no_selection", user_message="No image is selected.")
            return self.state.selection

        if isinstance(target, int) and not isinstance(target, bool):
            if not 0 <= target < len(images):
                raise NotFoundError(
                    f"Image index {target} out of range",
                    code="image_not_found",
                    user_message="Image not found.",
                    details={"index": target, "image_count": len(images)},
                )
            return target

        for index, record in enumerate(images):
            if record.id == target:
                return index

        raise NotFoundError(
            f"No image with id '{target}'",
            code="image_not_found",
            user_message="Image not found.",
            details={"image_id": str(target)},
        )

    # Selection / viewer navigation

    def select(self, index: int) -> ImageRecord:
        """Select the image at index for viewing."""
        self._require_authenticated("select")
        self.state.selection = self._resolve_target(index)
        return self.state.images[self.state.selection]

    def clear_selection(self) -> None:
        self.state.selection = None

    def current_image(self) -> ImageRecord | None:
        """The selected image, if any."""
        selection = self.state.selection
        if selection is None or not 0 <= selection < len(self.state.images):
            return None
        return self.state.images[selection]

    def select_next(self) -> ImageRecord | None:
        """Move the selection forward, wrapping at the end."""
        return self._step_selection(1)

    def select_previous(self) -> ImageRecord | None:
        """Move the selection backward, wrapping at the start."""
        return self._step_selection(-1)

    def _step_selection(self, step: int) -> ImageRecord | None:
        count = len(self.state.images)
        if count == 0:
            return None

        if self.state.selection is None:
            self.state.selection = 0 if step > 0 else count - 1
        else:
            self.state.selection = (self.state.selection + step) % count
        return self.state.images[self.state.selection]

    # Export

    def export_collection(self, exported_at: datetime | None = None) -> dict[str, Any]:
        """
        Snapshot the collection as an export document.

        Stores are not touched; the export is recorded in the audit trail.
        Naive exported_at values are taken as UTC.

        Returns:
            dict with exportedAt (ISO-8601), user and images

        Raises:
            AuthError: If nobody is logged in
        """
        username = self._require_authenticated("export")
        moment = as_utc(exported_at or datetime.now(UTC))
        document = {
            "exportedAt": moment.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "user": username,
            "images": [record.to_dict() for record in self.state.images],
        }
        log_user_action(username, "export", image_count=len(self.state.images))
        return document

    def export_json(self, exported_at: datetime | None = None) -> str:
        """Export document serialized as indented JSON."""
        return json.dumps(self.export_collection(exported_at), indent=2)

    def export_filename(self, exported_at: datetime | None = None) -> str:
        """Download name for an export: gallery_<user>_<epoch-ms>.json."""
        username = self._require_authenticated("export")
        return f"gallery_{username}_{to_epoch_millis(exported_at or datetime.now(UTC))}.json"

    # Internals

    def _enter_authenticated(self, username: str) -> None:
        self.state = GallerySessionState(username=username, images=self.image_store.load_for(username))
        self.session_tracker.persist(username)

    def _require_authenticated(self, operation: str) -> str:
        if self.state.username is None:
            log_security_event("unauthenticated_operation", operation=operation)
            raise AuthError(
                f"Operation '{operation}' requires login",
                code="not_authenticated",
                user_message="You must be logged in to do that.",
                details={"operation": operation},
            )
        return self.state.username

    @staticmethod
    def _confirmed(confirm: Confirmation, prompt: str) -> bool:
        if callable(confirm):
            return bool(confirm(prompt))
        return bool(confirm)
