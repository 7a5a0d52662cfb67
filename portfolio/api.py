from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from portfolio import settings
from portfolio.dataset_store import DatasetStore          # whole-dataset blob persistence
from portfolio.errors import NoFileProvided, PayloadTooLarge, UploadFailed
from portfolio.logger import get_logger
from portfolio.models import Dataset
from portfolio.uploads import URL_PREFIX, UploadStore     # avatar / project file storage

logger = get_logger(__name__)

# Headroom over the file ceiling for multipart boundaries and part headers
MULTIPART_OVERHEAD = 64 * 1024


# ══════════════════════════════════════════════════════════════════════════════
# Store access — both stores are owned by the app and shared by every request
# ══════════════════════════════════════════════════════════════════════════════

def get_dataset_store(request: Request) -> DatasetStore:
    return request.app.state.dataset_store


def get_upload_store(request: Request) -> UploadStore:
    return request.app.state.upload_store


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": message})


# ══════════════════════════════════════════════════════════════════════════════
# Upload endpoint
# ══════════════════════════════════════════════════════════════════════════════

def upload_file(file: Optional[UploadFile] = File(None),
                uploads: UploadStore = Depends(get_upload_store)):
    """
    Store one uploaded file (multipart field ``file``) and return its URL.

    The caller embeds the URL into a profile (avatar, project file, award
    image) and persists it with the next dataset write.
    """
    if file is None:
        return _error(400, "No file uploaded")

    # Read one byte past the ceiling: enough to tell "too large" without
    # buffering an arbitrarily big body
    payload = file.file.read(uploads.max_bytes + 1)

    try:
        stored = uploads.store(payload, file.filename or "")
    except NoFileProvided as e:
        return _error(400, str(e))
    except PayloadTooLarge as e:
        return _error(413, str(e))
    except UploadFailed as e:
        return _error(500, str(e))

    return {"url": stored.url, "filename": stored.filename}


# ══════════════════════════════════════════════════════════════════════════════
# Dataset endpoints
# ══════════════════════════════════════════════════════════════════════════════

def read_dataset(store: DatasetStore = Depends(get_dataset_store)):
    """Return every user and profile.  Always succeeds (possibly stale data)."""
    return store.read().to_json()


def write_dataset(dataset: Dataset, store: DatasetStore = Depends(get_dataset_store)):
    """
    Replace the whole dataset.

    ``mode`` tells the caller where the data ended up: "sheets" when it was
    written to the spreadsheet, "memory" when only this process holds it.
    """
    return store.write(dataset).to_json()


def health(store: DatasetStore = Depends(get_dataset_store)):
    return {"ok": True, "app": settings.APP_NAME, "mode": store.mode}


# ══════════════════════════════════════════════════════════════════════════════
# Application factory
# ══════════════════════════════════════════════════════════════════════════════

def create_app(dataset_store: DatasetStore = None, upload_store: UploadStore = None,
               dist_dir: Path = None) -> FastAPI:
    """
    Configure and create the FastAPI application.

    Stores default to the ones described by portfolio.settings; tests pass
    their own.  The dataset store decides sheets-vs-memory mode here, once.
    """
    if dataset_store is None:
        logger.info("Looking for credentials at: %s", settings.CREDENTIALS_PATH)
        if settings.CREDENTIALS_PATH.name == "credentials.json.json":
            logger.info("Found credentials with double extension (.json.json). Using it.")
        dataset_store = DatasetStore.from_credentials(settings.CREDENTIALS_PATH)
    if upload_store is None:
        upload_store = UploadStore()
    dist_dir = Path(dist_dir or settings.DIST_DIR)

    app = FastAPI(title=settings.APP_NAME)
    app.state.dataset_store = dataset_store
    app.state.upload_store = upload_store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        # Refuse oversized bodies from Content-Length, before anything is
        # buffered.  Uploads get the file ceiling plus room for multipart framing;
        # the exact per-file check still happens in UploadStore.store().
        length = request.headers.get("content-length")
        if length and length.isdigit():
            if request.url.path == "/api/upload":
                if int(length) > upload_store.max_bytes + MULTIPART_OVERHEAD:
                    return _error(413, "Upload too large")
            elif int(length) > settings.MAX_BODY_BYTES:
                return _error(413, "Request body too large")
        return await call_next(request)

    app.add_api_route("/api/upload", upload_file, methods=["POST"])
    app.add_api_route("/api/db/read", read_dataset, methods=["GET"])
    app.add_api_route("/api/db/write", write_dataset, methods=["POST"])
    app.add_api_route("/health", health, methods=["GET"])

    # Uploaded files, served read-only.  StaticFiles needs the directory to exist.
    upload_store.upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount(URL_PREFIX, StaticFiles(directory=upload_store.upload_dir), name="uploads")

    @app.get("/{full_path:path}", include_in_schema=False)
    def frontend(full_path: str):
        """Serve the built single-page app; unknown paths get index.html."""
        index = dist_dir / "index.html"
        if full_path.startswith("api/") or not index.exists():
            raise HTTPException(404, "Not found")

        root = dist_dir.resolve()
        candidate = (dist_dir / full_path).resolve()
        if full_path and candidate.is_file() and root in candidate.parents:
            return FileResponse(candidate)
        return FileResponse(index)

    return app


app = create_app()
