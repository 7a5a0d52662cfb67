import json
import threading
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from portfolio import settings
from portfolio.errors import ConfigurationMissing, MalformedStoredData, RemoteUnavailable
from portfolio.logger import get_logger
from portfolio.models import Dataset, Profile, User, WriteResult
from portfolio.sheets import SheetsClient

logger = get_logger(__name__)


def _decode_cell(cells: List[str], index: int, name: str, record_type) -> list:
    """
    Decode one stored cell into a list of records.

    Sheets drops trailing empty cells from a row, so a missing index is the
    same as an empty cell and decodes to [].  Records are validated one by
    one: a record that cannot be read is logged and skipped, the rest of the
    cell survives.
    """
    raw = cells[index] if index < len(cells) else ""
    if not raw:
        return []
    try:
        items = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedStoredData(name, f"invalid JSON ({e})") from e
    if not isinstance(items, list):
        raise MalformedStoredData(name, f"expected a JSON array, got {type(items).__name__}")

    records = []
    for position, item in enumerate(items):
        try:
            records.append(record_type.model_validate(item))
        except ValidationError as e:
            logger.error("Skipping %s[%d]: %d validation errors", name, position, e.error_count())
    return records


class DatasetStore:
    """
    Reads and writes the whole application dataset as two JSON blobs.

    With a SheetsClient the blobs live in a fixed two-cell range of a Google
    spreadsheet and the in-memory cache mirrors the last known good state.
    Without one (fallback mode) the cache is the only copy.

    Neither read() nor write() ever raises: reads degrade to the cache and
    writes report failure in the returned WriteResult.  Concurrent writers
    race and the last one to reach the spreadsheet wins.
    """

    def __init__(self, client: Optional[SheetsClient] = None):
        self.client = client

        # Process-local cache; FastAPI runs sync handlers on a thread pool,
        # so every access goes through the lock.
        self._lock = threading.Lock()
        self._cache = Dataset()

    @classmethod
    def from_credentials(cls, path: Path = None) -> "DatasetStore":
        """
        Build a store from a credentials file, deciding the mode once.

        A missing or unreadable file is not an error: the store simply runs in
        memory-only mode for the life of the process.
        """
        path = path or settings.CREDENTIALS_PATH
        try:
            client = SheetsClient.from_credentials_file(path)
        except ConfigurationMissing as e:
            logger.warning("%s. Using in-memory storage.", e)
            return cls(client=None)

        logger.info("Using Google Sheets storage (credentials: %s)", path)
        return cls(client=client)

    @property
    def fallback(self) -> bool:
        return self.client is None

    @property
    def mode(self) -> str:
        return "memory" if self.fallback else "sheets"

    def snapshot(self) -> Dataset:
        with self._lock:
            return self._cache.model_copy(deep=True)

    def _replace_cache(self, dataset: Dataset):
        with self._lock:
            self._cache = dataset

    # ──────────────────────────────────────────────────────────────────────────
    def read(self) -> Dataset:
        """Return the current dataset; never raises."""
        if self.fallback:
            return self.snapshot()

        try:
            rows = self.client.get_values()
        except RemoteUnavailable as e:
            logger.error("Read error: %s. Serving cached dataset.", e)
            return self.snapshot()

        # Nothing stored yet; leave the cache alone
        if not rows:
            return Dataset()

        cells = rows[0]
        try:
            users = _decode_cell(cells, 0, "users", User)
        except MalformedStoredData as e:
            logger.error("%s. Substituting an empty list.", e)
            users = []
        try:
            profiles = _decode_cell(cells, 1, "profiles", Profile)
        except MalformedStoredData as e:
            logger.error("%s. Substituting an empty list.", e)
            profiles = []

        dataset = Dataset(users=users, profiles=profiles)
        self._replace_cache(dataset)
        return dataset.model_copy(deep=True)

    # ──────────────────────────────────────────────────────────────────────────
    def write(self, dataset: Dataset) -> WriteResult:
        """
        Persist the whole dataset, replacing whatever was stored before.

        The cache is updated before the remote call, so a later read() in this
        process sees the new data even if the spreadsheet update fails.
        """
        self._replace_cache(dataset.model_copy(deep=True))

        if self.fallback:
            return WriteResult(success=True, mode="memory")

        payload = dataset.to_json()
        row = [json.dumps(payload["users"]), json.dumps(payload["profiles"])]

        try:
            self.client.update_values([row])
        except RemoteUnavailable as e:
            logger.error("Write error: %s. Change kept in memory only.", e)
            return WriteResult(success=False, mode="memory", error=str(e))

        return WriteResult(success=True, mode="sheets")
