from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Verdict = Literal["Genuine", "Suspicious", "Fake"]


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    hostname: str


class EngineReply(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    # Raw grounding URIs the engine says it consulted.
    citations: list[str] = Field(default_factory=list)


class Breakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    reviews: list[str] = Field(default_factory=list)
    sentiment: list[str] = Field(default_factory=list)
    price: list[str] = Field(default_factory=list)
    seller: list[str] = Field(default_factory=list)
    description: list[str] = Field(default_factory=list)


class NormalizedResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    trust_score: int = Field(..., ge=0, le=100)
    verdict: Verdict
    reasons: list[str] = Field(..., min_length=1)
    advice: str = Field(..., min_length=1)
    nlp_insights: list[str]
    breakdown: Breakdown
    url: str
    timestamp: str
    sources: list[str]


class ScoreTierOut(BaseModel):
    low: int
    high: int
    range_label: str
    label: str
    description: str
    advice: str


class AnalyzeBody(BaseModel):
    url: str = Field(..., min_length=1)


class AnalyzeResponse(NormalizedResult):
    tier: ScoreTierOut
