"""Line Rehearsal – FastAPI application entry point."""

from __future__ import annotations

import logging
import sys

from fastapi import FastAPI

from rehearsal.config import settings

# --- Configure logging so rehearsal.* loggers are visible alongside uvicorn ---
logging.basicConfig(
    level=settings.log_level,
    format="%(levelname)s:    %(name)s - %(message)s",
    stream=sys.stdout,
    force=True,  # override uvicorn's config
)

log = logging.getLogger(__name__)

app = FastAPI(title="Line Rehearsal", version="0.1.0")


@app.get("/health")
async def health():
    return {"status": "ok"}


# --- Register routers ---
from rehearsal.routes.accuracy import router as accuracy_router  # noqa: E402

app.include_router(accuracy_router, prefix="/api")

log.info(
    "Line Rehearsal ready (lookahead=%d, name similarity=%.2f, freeze on error=%s)",
    settings.lookahead_window,
    settings.name_similarity_threshold,
    settings.freeze_locked_on_error,
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
