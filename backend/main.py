import logging
import os
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from formatting import format_recurrence
from models import (
    DescribeRequest,
    NextOccurrenceRequest,
    OccurrencesRequest,
    ParseRequest,
    ReminderPreviewRequest,
    dump_rule,
)
from recurrence import list_occurrences, next_occurrence, reminder_next_occurrence, reminder_occurrences
from text_parser import parse_recurrence

load_dotenv()

ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "http://localhost:8081").split(",") if o.strip()]
DEFAULT_PREVIEW_COUNT = int(os.getenv("DEFAULT_PREVIEW_COUNT", "5"))
MAX_PREVIEW_COUNT = int(os.getenv("MAX_PREVIEW_COUNT", "100"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Anchor recurrence engine")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _preview_count(count: Optional[int]) -> int:
    """Requested preview size, defaulted and bounded by configuration."""
    if count is None:
        return DEFAULT_PREVIEW_COUNT
    if count > MAX_PREVIEW_COUNT:
        raise HTTPException(status_code=400, detail=f"count must be at most {MAX_PREVIEW_COUNT}")
    return count


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/recurrence/next")
def get_next_occurrence(request: NextOccurrenceRequest) -> dict:
    return {"next": next_occurrence(request.anchor, request.rule, request.reference)}


@app.post("/recurrence/occurrences")
def get_occurrences(request: OccurrencesRequest) -> dict:
    count = _preview_count(request.count)
    return {"occurrences": list_occurrences(request.anchor, request.rule, count)}


@app.post("/recurrence/describe")
def describe(request: DescribeRequest) -> dict:
    return {"description": format_recurrence(request.rule)}


@app.post("/recurrence/parse")
def parse_text(request: ParseRequest) -> dict:
    """Parse free text; rule is null when nothing was recognized."""
    rule = parse_recurrence(request.text)
    if rule is None:
        logger.info("No recurrence found in text")
        return {"rule": None, "description": None}
    return {"rule": dump_rule(rule), "description": format_recurrence(rule)}


@app.post("/reminders/preview")
def preview_reminder(request: ReminderPreviewRequest) -> dict:
    reminder = request.reminder
    count = _preview_count(request.count)
    return {
        "description": format_recurrence(reminder.recurrence),
        "next": reminder_next_occurrence(reminder),
        "occurrences": reminder_occurrences(reminder, count),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
