"""
Clients for the Gemini reasoning engine.

Both clients take an explicit EngineSettings and translate every failure into
the pipeline's error taxonomy, so the orchestrator can decide between
surfacing the error and falling back.
"""
from __future__ import annotations

import asyncio
import re
from typing import Any, Protocol

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from .config import EngineSettings
from .errors import (
    AnalysisError,
    CredentialMissing,
    EmptyResponse,
    NetworkFailure,
    RateLimited,
    Unauthorized,
)
from .log import get_logger
from .models import AnalysisRequest, EngineReply

logger = get_logger(__name__)

GEMINI_REST_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

_BAD_KEY_RE = re.compile(r"API_KEY_INVALID|API key not valid|API key expired", re.IGNORECASE)


class EngineClient(Protocol):
    async def generate(
        self,
        request: AnalysisRequest,
        *,
        system_instruction: str,
        prompt: str,
    ) -> EngineReply: ...

    async def aclose(self) -> None: ...


def classify_status(status: int | None, message: str = "") -> AnalysisError:
    """Map an HTTP/API status to the error taxonomy."""
    detail = f"Engine call failed ({status}): {message}".strip() if status else f"Engine call failed: {message}"
    if status in (401, 403) or _BAD_KEY_RE.search(message or ""):
        return Unauthorized(detail)
    if status == 429:
        return RateLimited(detail)
    return NetworkFailure(detail)


def classify_engine_error(exc: BaseException) -> AnalysisError:
    if isinstance(exc, AnalysisError):
        return exc
    if isinstance(exc, (asyncio.TimeoutError, httpx.TimeoutException)):
        return NetworkFailure(f"Engine call timed out: {exc}")
    if isinstance(exc, httpx.TransportError):
        return NetworkFailure(f"Engine unreachable: {exc}")
    if isinstance(exc, genai_errors.APIError):
        return classify_status(exc.code, str(exc))
    if isinstance(exc, httpx.HTTPStatusError):
        return classify_status(exc.response.status_code, str(exc))
    return classify_status(None, str(exc))


def _require_key(settings: EngineSettings) -> str:
    if not settings.api_key:
        raise CredentialMissing("GEMINI_API_KEY is not configured.")
    return settings.api_key


class GeminiEngineClient:
    """Calls Gemini through the official google-genai SDK (async surface)."""

    def __init__(self, settings: EngineSettings, *, client: Any | None = None) -> None:
        self._settings = settings
        self._client = client
        self._owns_client = client is None

    def _sdk_client(self, api_key: str) -> Any:
        if self._client is None:
            self._client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=int(self._settings.timeout_s * 1000)),
            )
        return self._client

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aio.aclose()
            self._client = None

    def _config(self, system_instruction: str) -> types.GenerateContentConfig:
        tools = None
        mime_type: str | None = "application/json"
        if self._settings.use_search:
            # JSON mode can't be combined with the search tool on every model;
            # the extractor copes with prose around the object.
            tools = [types.Tool(google_search=types.GoogleSearch())]
            mime_type = None

        return types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=self._settings.temperature,
            response_mime_type=mime_type,
            tools=tools,
            safety_settings=[
                types.SafetySetting(
                    category=types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
                    threshold=types.HarmBlockThreshold.BLOCK_ONLY_HIGH,
                )
            ],
        )

    async def generate(
        self,
        request: AnalysisRequest,
        *,
        system_instruction: str,
        prompt: str,
    ) -> EngineReply:
        api_key = _require_key(self._settings)
        client = self._sdk_client(api_key)

        try:
            resp = await client.aio.models.generate_content(
                model=self._settings.model,
                contents=prompt,
                config=self._config(system_instruction),
            )
        except Exception as e:
            raise classify_engine_error(e) from e

        text = (getattr(resp, "text", None) or "").strip()
        if not text:
            raise EmptyResponse(f"Engine returned no text for {request.hostname}")

        return EngineReply(text=text, citations=_sdk_citations(resp))


def _sdk_citations(resp: Any) -> list[str]:
    candidates = getattr(resp, "candidates", None) or []
    if not candidates:
        return []
    meta = getattr(candidates[0], "grounding_metadata", None)
    uris: list[str] = []
    for chunk in getattr(meta, "grounding_chunks", None) or []:
        uri = getattr(getattr(chunk, "web", None), "uri", None)
        if uri:
            uris.append(uri)
    return uris


class RestEngineClient:
    """Calls the public generateContent REST endpoint with httpx."""

    def __init__(
        self,
        settings: EngineSettings,
        *,
        http_client: httpx.AsyncClient | None = None,
        endpoint: str = GEMINI_REST_URL,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._owns_http = http_client is None
        self._endpoint = endpoint

    def _body(self, system_instruction: str, prompt: str) -> dict[str, Any]:
        generation_config: dict[str, Any] = {
            "temperature": self._settings.temperature,
            "topP": 0.9,
        }
        body: dict[str, Any] = {
            "systemInstruction": {"parts": [{"text": system_instruction}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }
        if self._settings.use_search:
            body["tools"] = [{"google_search": {}}]
        else:
            generation_config["responseMimeType"] = "application/json"
        return body

    def _http_client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self._settings.timeout_s)
        return self._http

    async def aclose(self) -> None:
        if self._owns_http and self._http is not None:
            await self._http.aclose()
            self._http = None

    async def generate(
        self,
        request: AnalysisRequest,
        *,
        system_instruction: str,
        prompt: str,
    ) -> EngineReply:
        api_key = _require_key(self._settings)
        url = self._endpoint.format(model=self._settings.model)
        headers = {"content-type": "application/json", "x-goog-api-key": api_key}

        try:
            res = await self._http_client().post(url, json=self._body(system_instruction, prompt), headers=headers)
        except (httpx.HTTPError, asyncio.TimeoutError) as e:
            raise classify_engine_error(e) from e

        if res.status_code < 200 or res.status_code >= 300:
            raise classify_status(res.status_code, res.text[:500])

        try:
            data = res.json()
        except ValueError as e:
            raise NetworkFailure("Engine returned a non-JSON envelope.") from e

        candidate = _first_candidate(data)
        text = _rest_text(candidate)
        if not text:
            raise EmptyResponse(f"Engine returned no text for {request.hostname}")

        return EngineReply(text=text, citations=_rest_citations(candidate))


def _first_candidate(data: Any) -> dict[str, Any] | None:
    if not isinstance(data, dict):
        return None
    candidates = data.get("candidates")
    if isinstance(candidates, list) and candidates and isinstance(candidates[0], dict):
        return candidates[0]
    return None


def _rest_text(candidate: dict[str, Any] | None) -> str:
    # Blocked or truncated replies can carry a string or null where the parts live.
    content = (candidate or {}).get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return ""
    texts = [p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)]
    return "".join(texts).strip()


def _rest_citations(candidate: dict[str, Any] | None) -> list[str]:
    meta = (candidate or {}).get("groundingMetadata")
    chunks = meta.get("groundingChunks") if isinstance(meta, dict) else None
    if not isinstance(chunks, list):
        return []
    uris: list[str] = []
    for chunk in chunks:
        web = chunk.get("web") if isinstance(chunk, dict) else None
        uri = web.get("uri") if isinstance(web, dict) else None
        if isinstance(uri, str) and uri:
            uris.append(uri)
    return uris


def build_engine(settings: EngineSettings) -> EngineClient:
    logger.info(f"Engine backend={settings.backend} model={settings.model} search={settings.use_search}")
    if settings.backend == "rest":
        return RestEngineClient(settings)
    return GeminiEngineClient(settings)
