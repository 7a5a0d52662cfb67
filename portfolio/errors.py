"""
Error types raised by the dataset store and the upload store.

The dataset store catches its own errors and always degrades to a usable
result; only the upload store lets errors reach the HTTP layer.
"""


class PortfolioError(Exception):
    """Base class for every error raised inside the portfolio package."""


# ── Dataset store (never escape DatasetStore) ─────────────────────────────────

class ConfigurationMissing(PortfolioError):
    """No usable credentials → the store runs in memory-only fallback mode."""


class RemoteUnavailable(PortfolioError):
    """Network, auth, quota or timeout failure talking to Google Sheets."""


class MalformedStoredData(PortfolioError):
    """A stored cell is not valid JSON or does not match the schema."""

    def __init__(self, cell: str, reason: str):
        super().__init__(f"Malformed {cell} cell: {reason}")
        self.cell = cell


# ── Upload store ──────────────────────────────────────────────────────────────
# Caller-input problems are ValueErrors, same as every other bad request.

class NoFileProvided(PortfolioError, ValueError):
    def __init__(self, message: str = "No file uploaded"):
        super().__init__(message)


class PayloadTooLarge(PortfolioError, ValueError):
    def __init__(self, size: int, limit: int):
        super().__init__(f"File too large: exceeds the {limit} byte limit")
        self.size = size
        self.limit = limit


class UploadFailed(PortfolioError):
    """Disk full, permission denied and other infrastructure failures."""
