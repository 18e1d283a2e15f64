import asyncio
import logging
import os
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import Body, FastAPI, File, HTTPException, UploadFile
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from .core import configure_logging
from .extract_replay_header import build_header
from .summary_service import HeaderSummary, format_summary_text, summarize_header
from . import summary_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run startup/shutdown hooks for the FastAPI app."""
    configure_logging()
    logger.info("Starting Replay Header API...")
    yield
    logger.info("Shutting down Replay Header API...")


app = FastAPI(title="Replay Header API", lifespan=lifespan)


class HeaderFileRequest(BaseModel):
    header_path: str


def _to_http_exception(exc: Exception) -> HTTPException:
    """Normalize internal exceptions to an HTTPException."""
    if isinstance(exc, (ValueError, FileNotFoundError)):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail="Failed to summarize header")


@app.post("/header/summary", response_model=HeaderSummary)
def summary_endpoint(dump: dict[str, Any] = Body(...)):
    """Summarize a header dump posted as JSON."""
    try:
        return summarize_header(build_header(dump))
    except Exception as exc:
        raise _to_http_exception(exc) from exc


@app.post("/header/summary/file", response_model=HeaderSummary)
def summary_file_endpoint(request: HeaderFileRequest):
    """Summarize a header dump file available to the server."""
    logger.info("Received request to summarize header: %s", request.header_path)
    try:
        return summary_service.summarize_file(request.header_path)
    except Exception as exc:
        raise _to_http_exception(exc) from exc


@app.post("/header/summary/upload", response_model=HeaderSummary)
async def summary_upload(file: UploadFile = File(...)):
    """Accept a header dump upload and return its summary."""
    content = await file.read()
    fd, tmp_path = tempfile.mkstemp(suffix=".header")
    try:
        os.close(fd)
        await asyncio.to_thread(Path(tmp_path).write_bytes, content)

        try:
            return await asyncio.to_thread(summary_service.summarize_file, tmp_path)
        except Exception as exc:
            raise _to_http_exception(exc) from exc
    finally:
        try:
            await asyncio.to_thread(Path(tmp_path).unlink)
        except Exception:
            logger.exception("Failed to remove temporary uploaded header dump")


@app.post("/header/report", response_class=PlainTextResponse)
def report_endpoint(dump: dict[str, Any] = Body(...)):
    """Render a header dump posted as JSON as a plain-text report."""
    try:
        return format_summary_text(build_header(dump))
    except Exception as exc:
        raise _to_http_exception(exc) from exc


@app.get("/health")
def health_check():
    """Simple health endpoint for readiness checks."""
    return {"status": "ok"}
