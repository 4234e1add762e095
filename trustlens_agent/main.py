from __future__ import annotations

from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .config import cors_allow_origins, load_env, load_settings
from .engine import build_engine
from .errors import CredentialMissing, InvalidURL, Unauthorized
from .log import get_logger
from .models import AnalyzeBody, AnalyzeResponse, ScoreTierOut
from .orchestrator import AnalysisOrchestrator
from .tiers import SCORE_TIERS

# Load the project .env before anything below reads the environment.
load_env()

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_orchestrator() -> AnalysisOrchestrator:
    return AnalysisOrchestrator(build_engine(load_settings()))


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    if get_orchestrator.cache_info().currsize:
        await get_orchestrator().aclose()
        get_orchestrator.cache_clear()


app = FastAPI(title="TrustLens Forensic Agent", version="0.1.0", lifespan=lifespan)

# For local dev, this defaults to allowing http://localhost:3000.
# In production, set TRUSTLENS_CORS_ORIGINS to your deployed frontend origins.
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allow_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/healthz")
def healthz():
    return {"ok": True}


@app.get("/tiers", response_model=list[ScoreTierOut])
def tiers_endpoint():
    return [t.to_model() for t in SCORE_TIERS]


@app.post("/analyze", response_model=AnalyzeResponse)
async def analyze_endpoint(
    body: AnalyzeBody,
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    try:
        result, tier = await orchestrator.analyze_with_tier(body.url)
    except InvalidURL as e:
        raise HTTPException(status_code=400, detail=e.message)
    except CredentialMissing:
        raise HTTPException(
            status_code=503,
            detail="Analysis engine is not configured. Set GEMINI_API_KEY and retry.",
        )
    except Unauthorized:
        raise HTTPException(
            status_code=502,
            detail="Permission denied. A paid API key might be required for this model.",
        )
    return AnalyzeResponse(**result.model_dump(), tier=tier.to_model())
