"""
EmailGate — FastAPI Backend
===========================
HTTP surface for the admin dashboard's email validator panel:
  - Single address validation
  - Batch validation (JSON report)
  - Batch validation streamed as Server-Sent Events (disconnect cancels)

Start:
    uvicorn main_api:app --reload --port 8000

Interactive docs:
    http://localhost:8000/docs
"""

import asyncio
import json
import logging
import os
import uuid
from typing import List, Optional, Union

from dotenv import load_dotenv

load_dotenv()

from fastapi import Depends, FastAPI, Header, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from emailgate.domain.errors import InputError

logging.basicConfig(level=logging.INFO, format="%(levelname)s  %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# ── App ───────────────────────────────────────────────────────────────────────

app = FastAPI(title="EmailGate API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Dependency-injection container (initialised at startup) ───────────────────

_container = None
_startup_error: Optional[str] = None


@app.on_event("startup")
async def startup():
    global _container, _startup_error
    try:
        from emailgate.infrastructure.config import Config
        from emailgate.infrastructure.container import Container

        _container = Container(Config.from_env())
        logger.info("Container initialised successfully.")
    except Exception as e:
        _startup_error = str(e)
        logger.error(f"Container startup failed: {e}")


def get_container():
    if _startup_error:
        raise HTTPException(status_code=503, detail=f"Service misconfigured: {_startup_error}")
    if _container is None:
        raise HTTPException(status_code=503, detail="Service not ready.")
    return _container


# ── Auth ──────────────────────────────────────────────────────────────────────

_API_KEY = os.getenv("API_KEY", "dev-key")


def _auth(x_api_key: str = Header(...)) -> None:
    if x_api_key != _API_KEY:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


# ── Request models ────────────────────────────────────────────────────────────


class SingleValidationRequest(BaseModel):
    email: str


class BatchValidationRequest(BaseModel):
    emails: Union[str, List[str]]


# ── Health / config ───────────────────────────────────────────────────────────


@app.get("/health", tags=["meta"])
async def health():
    return {"status": "ok", "error": _startup_error}


@app.get("/config-status", tags=["meta"])
async def config_status(_: None = Depends(_auth)):
    """Return the oracle configuration (masked key) and request count."""
    return get_container().configuration_status()


# ── Validation ────────────────────────────────────────────────────────────────


@app.post("/validate/single", tags=["validation"])
async def validate_single(req: SingleValidationRequest, _: None = Depends(_auth)):
    c = get_container()
    try:
        result = await c.validate_single_use_case.execute(req.email)
    except InputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return result.to_dict()


@app.post("/validate/batch", tags=["validation"])
async def validate_batch(req: BatchValidationRequest, _: None = Depends(_auth)):
    """Validate up to 100 addresses and return the aggregated report."""
    from emailgate.use_cases.validate_batch import ValidateBatchRequest

    c = get_container()
    try:
        report = await c.validate_batch_use_case.execute(ValidateBatchRequest(emails=req.emails))
    except InputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return report.to_dict()


@app.post("/validate/batch/stream", tags=["validation"])
async def validate_batch_stream(req: BatchValidationRequest, _: None = Depends(_auth)):
    """
    Stream batch progress via Server-Sent Events.
    Emits: batch_start, email_done, batch_complete | batch_cancelled, report.
    Closing the connection cancels the remaining lookups.
    """
    from emailgate.use_cases.normalize_input import normalize_candidates
    from emailgate.use_cases.validate_batch import ValidateBatchRequest

    c = get_container()
    use_case = c.validate_batch_use_case

    # Input errors are reported as HTTP errors before the stream opens
    try:
        normalize_candidates(req.emails, max_candidates=use_case.max_batch_size)
    except InputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    batch_id = str(uuid.uuid4())
    cancel_event = asyncio.Event()
    queue: asyncio.Queue = asyncio.Queue()

    logger.info(f"[API] /validate/batch/stream opened | batch_id={batch_id}")

    async def _run():
        try:
            report = await use_case.execute(
                ValidateBatchRequest(emails=req.emails, batch_id=batch_id, cancel_event=cancel_event),
                event_callback=queue.put,
            )
            await queue.put({"type": "report", "report": report.to_dict()})
        except Exception as e:
            logger.error(f"[API] Batch FAILED | batch_id={batch_id} | error={e!r}", exc_info=True)
            await queue.put({"type": "error", "message": str(e)})
        finally:
            await queue.put(None)  # sentinel — closes the stream

    task = asyncio.create_task(_run())

    async def event_stream():
        try:
            while True:
                event = await queue.get()
                if event is None:
                    break
                yield f"data: {json.dumps(event)}\n\n"
        finally:
            if not task.done():
                logger.info(f"[API] Client went away, cancelling batch {batch_id[:8]}")
                cancel_event.set()

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
