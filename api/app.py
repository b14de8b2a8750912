from __future__ import annotations
from fastapi import FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import os, typing as t
from dataclasses import asdict

from grading_core import config
from grading_core.audit_export import to_csv as audit_to_csv
from grading_core.audit_questions import audit_questions
from grading_core.bands import percentage_of, to_band
from grading_core.config import load_settings
from grading_core.engine import grade_session
from grading_core.matching import policy_table
from grading_core.scoring import score_item
from grading_core.types import Question

SETTINGS = load_settings()

app = FastAPI(title="Grading Engine API")


@app.get("/")
def root():
    return {"status": "ok", "service": "grading-engine-api"}


ALLOWED_ORIGINS = [
    o.strip()
    for o in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if o.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,  # keep False unless you use cookies
)

# ---- Schemas ----
# Question and answer bodies stay loose dicts: the engine degrades odd shapes itself.
class GradeItemReq(BaseModel):
    question: dict[str, t.Any]
    user_answer: t.Any = Field(default=None, alias="userAnswer")

    model_config = {"populate_by_name": True}

class GradeSessionReq(BaseModel):
    questions: list[dict[str, t.Any]]
    answers: list[dict[str, t.Any]] = []
    sections: list[dict[str, t.Any]] | None = None

class AuditReq(BaseModel):
    questions: list[dict[str, t.Any]]


# ---- Health ----
@app.get("/health")
def health():
    return {
        "strict_types": sorted(SETTINGS.strict_types),
        "policies": {qt.value: p.value for qt, p in policy_table(SETTINGS).items()},
        "band_table": [list(row) for row in SETTINGS.band_table],
        "band_floor": SETTINGS.band_floor,
        "resolver": asdict(SETTINGS.resolver),
        "audit_export_enabled": config.AUDIT_EXPORT_ENABLED,
    }


# ---- Grading ----
@app.post("/grade/item")
def grade_item(req: GradeItemReq):
    question = Question.from_dict(req.question)
    outcome = score_item(req.user_answer, question, SETTINGS)
    return {"question_id": question.id, "type": question.type_name, **outcome.to_dict()}

@app.post("/grade/session")
def grade_session_endpoint(req: GradeSessionReq):
    report = grade_session(req.answers, req.questions, req.sections, SETTINGS)
    return report.to_dict()

@app.post("/grade/session/audit.csv")
def grade_session_audit_csv(req: GradeSessionReq):
    if not config.AUDIT_EXPORT_ENABLED:
        raise HTTPException(404, "audit export disabled")
    report = grade_session(req.answers, req.questions, req.sections, SETTINGS)
    return Response(
        content=audit_to_csv(report.audit_events),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=\"grading_audit.csv\""},
    )

@app.get("/bands")
def bands(correct: int = Query(..., description="points earned"), total: int = Query(..., description="point capacity")):
    if correct < 0 or total < 0:
        raise HTTPException(422, "counts must be non-negative")
    return {
        "percentage": percentage_of(correct, total),
        "band_score": to_band(correct, total, SETTINGS.band_table, SETTINGS.band_floor),
    }

@app.post("/questions/audit")
def audit(req: AuditReq):
    return audit_questions([Question.from_dict(q) for q in req.questions], SETTINGS)
