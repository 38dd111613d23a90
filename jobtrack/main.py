import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from jobtrack.api.v1.requests import router as requests_router
from jobtrack.application.exceptions import StoreError
from jobtrack.core.config import settings

LOG_CONTEXT_KEYS = ("request_id", "status", "actor", "reason", "error")


class ContextFormatter(logging.Formatter):
    """Appends the job-tracking ``extra`` fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        pairs = [
            f"{key}={getattr(record, key)}"
            for key in LOG_CONTEXT_KEYS
            if getattr(record, key, None) not in (None, "")
        ]
        return f"{base} | {' '.join(pairs)}" if pairs else base


def configure_logging(level: str) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)


configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Mobile Mechanic Job Tracking", version="1.0.0")
app.include_router(requests_router, prefix="/api/v1/requests", tags=["requests"])


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logging.getLogger(__name__).error("Store unavailable", extra={"error": str(exc)})
    return JSONResponse(status_code=503, content={"detail": "Job records are temporarily unavailable"})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "env": settings.ENV}
