import os
from pathlib import Path

# ── Directory & file paths resolved relative to the project root ──────────────
BASE_DIR     = Path(__file__).resolve().parent       # → portfolio/
PROJECT_ROOT = BASE_DIR.parent                       # → repository root

UPLOAD_DIR = Path(os.environ.get("PORTFOLIO_UPLOAD_DIR", PROJECT_ROOT / "uploads"))
DIST_DIR   = Path(os.environ.get("PORTFOLIO_DIST_DIR", PROJECT_ROOT / "dist"))

# ── Google Sheets backing store ───────────────────────────────────────────────
# The whole dataset lives in two cells: A1 holds the users JSON, B1 the profiles JSON.
SPREADSHEET_ID = os.environ.get(
    "PORTFOLIO_SPREADSHEET_ID", "1SOiu3TxFCgB-YXmR6vMig4Kp5gU-U3IfFAr9aLARgBo"
)
SHEET_RANGE    = os.environ.get("PORTFOLIO_SHEET_RANGE", "DB!A1:B1")
SHEETS_SCOPES  = ["https://www.googleapis.com/auth/spreadsheets"]
SHEETS_TIMEOUT = float(os.environ.get("PORTFOLIO_SHEETS_TIMEOUT", "10"))


def resolve_credentials_path(root: Path = PROJECT_ROOT) -> Path:
    """
    Return the service-account credentials file to use.

    An explicit PORTFOLIO_CREDENTIALS path always wins.  Otherwise look for
    credentials.json next to the project, and accept credentials.json.json
    too (a common result of saving the key download with a hidden extension).
    The returned path may not exist; the dataset store treats that as
    fallback mode.
    """
    explicit = os.environ.get("PORTFOLIO_CREDENTIALS")
    if explicit:
        return Path(explicit)

    path = root / "credentials.json"
    if not path.exists():
        double_ext = root / "credentials.json.json"
        if double_ext.exists():
            return double_ext
    return path


CREDENTIALS_PATH = resolve_credentials_path()

# ── Upload limits ─────────────────────────────────────────────────────────────
MAX_UPLOAD_BYTES = int(float(os.environ.get("PORTFOLIO_MAX_UPLOAD_MB", "50")) * 1024 * 1024)
MAX_BODY_BYTES   = 50 * 1024 * 1024      # JSON body ceiling for /api/db/write

# ── Server ────────────────────────────────────────────────────────────────────
APP_NAME  = "E-Portfolio"
HOST      = os.environ.get("HOST", "0.0.0.0")
PORT      = int(os.environ.get("PORT", "3000"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
