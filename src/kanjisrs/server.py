import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from kanjisrs.application.answers import AnswerChecker, RomajiConverter
from kanjisrs.application.srs import SrsEngine
from kanjisrs.consts import VERSION
from kanjisrs.domain.models import AnswerOutcome, SRSStage

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("kanjisrs.server")

checker = AnswerChecker()
engine = SrsEngine()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"kanjisrs server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("kanjisrs server shutting down...")


app = FastAPI(
    title="kanjisrs Server",
    description="Answer checking, romaji conversion and SRS scheduling over HTTP.",
    version=VERSION,
    lifespan=lifespan,
)


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


start_time = time.time()


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


class CheckReadingRequest(BaseModel):
    answer: str
    accepted: list[str]
    auto_convert_katakana: bool = True


class CheckMeaningRequest(BaseModel):
    answer: str
    accepted: list[str]
    fuzzy_enabled: bool = True


class CheckResponse(BaseModel):
    result: str
    distance: int | None = None
    correct: bool


def _check_response(outcome: AnswerOutcome) -> CheckResponse:
    return CheckResponse(
        result=outcome.result.value,
        distance=outcome.distance,
        correct=outcome.counts_as_correct,
    )


@app.post("/check/reading", response_model=CheckResponse)
async def check_reading(req: CheckReadingRequest):
    outcome = checker.check_reading(
        req.answer, req.accepted, auto_convert_katakana=req.auto_convert_katakana
    )
    return _check_response(outcome)


@app.post("/check/meaning", response_model=CheckResponse)
async def check_meaning(req: CheckMeaningRequest):
    outcome = checker.check_meaning(req.answer, req.accepted, fuzzy_enabled=req.fuzzy_enabled)
    return _check_response(outcome)


class RomajiRequest(BaseModel):
    text: str
    # Keep unfinished input pending instead of finalizing it
    buffer: str = ""
    finalize: bool = True


class RomajiResponse(BaseModel):
    kana: str
    buffer: str


@app.post("/romaji", response_model=RomajiResponse)
async def convert_romaji(req: RomajiRequest):
    """
    Feed text through the romaji converter.

    With ``finalize`` off, the unconverted tail comes back as ``buffer`` so a
    client can continue the same input on the next call.
    """
    kana = ""
    buffer = req.buffer
    for char in req.text:
        emitted, buffer = RomajiConverter.feed(buffer, char)
        kana += emitted

    if req.finalize:
        return RomajiResponse(kana=kana + RomajiConverter.finalize(buffer), buffer="")
    return RomajiResponse(kana=kana, buffer=buffer)


class NextStageRequest(BaseModel):
    stage: int = Field(ge=int(SRSStage.LESSON), le=int(SRSStage.BURNED))
    meaning_correct: bool
    reading_correct: bool = True
    now: datetime | None = None


class NextStageResponse(BaseModel):
    stage: int
    stage_name: str
    next_review_at: datetime | None


@app.post("/srs/next", response_model=NextStageResponse)
async def next_stage(req: NextStageRequest):
    now = req.now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        raise HTTPException(status_code=400, detail="'now' must include a timezone offset")

    stage = engine.next_stage(SRSStage(req.stage), req.meaning_correct, req.reading_correct)
    return NextStageResponse(
        stage=int(stage),
        stage_name=stage.display_name,
        next_review_at=engine.next_review_at(stage, now),
    )
