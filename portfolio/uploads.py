import random
import threading
import time
from pathlib import Path
from typing import Optional

from portfolio import settings
from portfolio.errors import NoFileProvided, PayloadTooLarge, UploadFailed
from portfolio.logger import get_logger
from portfolio.models import StoredFile

logger = get_logger(__name__)

URL_PREFIX = "/uploads"


class UploadStore:
    """
    Stores uploaded avatars / project files / award images under a public
    directory and returns the URL they are served from.

    Storage names look like ``<time_ns>-<random><ext>``.  The timestamp part
    is strictly increasing within the process and files are opened with
    exclusive-create, so a name is never handed out twice.
    """

    def __init__(self, upload_dir: Path = settings.UPLOAD_DIR,
                 max_bytes: int = settings.MAX_UPLOAD_BYTES):
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes

        # Guards _last_stamp so two threads never draw the same timestamp
        self._stamp_lock = threading.Lock()
        self._last_stamp = 0

    def _next_stamp(self) -> int:
        with self._stamp_lock:
            stamp = max(time.time_ns(), self._last_stamp + 1)
            self._last_stamp = stamp
            return stamp

    def new_storage_name(self, original_filename: str) -> str:
        """Collision-resistant name that keeps the original file extension."""
        ext = Path(original_filename or "").suffix
        if not ext[1:].isalnum():
            ext = ""
        return f"{self._next_stamp()}-{random.randint(0, 10**9)}{ext}"

    def path_for(self, storage_name: str) -> Path:
        """
        Resolve a storage name to its path inside the upload directory.

        Rejects names that could escape the directory ('..', '/' or '\\').
        """
        if not storage_name or ".." in storage_name or "/" in storage_name or "\\" in storage_name:
            raise ValueError("Invalid filename")
        return self.upload_dir / storage_name

    # ──────────────────────────────────────────────────────────────────────────
    def store(self, payload: Optional[bytes], original_filename: str) -> StoredFile:
        """
        Persist one uploaded file and return its public URL.

        Raises NoFileProvided for a missing/empty payload and PayloadTooLarge
        when it exceeds max_bytes; in both cases nothing touches the disk.
        Filesystem failures surface as UploadFailed.
        """
        if not payload:
            raise NoFileProvided()

        size = len(payload)
        if size > self.max_bytes:
            raise PayloadTooLarge(size, self.max_bytes)

        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)

            while True:
                storage_name = self.new_storage_name(original_filename)
                try:
                    # 'xb' → fail instead of overwriting an existing upload
                    with open(self.path_for(storage_name), "xb") as f:
                        f.write(payload)
                    break
                except FileExistsError:
                    continue
        except OSError as e:
            logger.error("Upload of %r failed: %s", original_filename, e)
            raise UploadFailed(f"Could not store file: {e.strerror or e}") from e

        logger.info("Stored upload %r as %s (%d bytes)", original_filename, storage_name, size)
        return StoredFile(
            url=f"{URL_PREFIX}/{storage_name}",
            filename=original_filename,
            storage_name=storage_name,
            size=size,
        )
