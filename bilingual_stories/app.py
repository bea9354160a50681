"""FastAPI application: parse and validate story text over HTTP."""
from __future__ import annotations

import logging

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

from fastapi import FastAPI, HTTPException, Request

from bilingual_stories import locales
from bilingual_stories.config import Settings, load_settings, save_settings
from bilingual_stories.errors import TITLE_FORMATS
from bilingual_stories.models import story_from_dict
from bilingual_stories.validator import check_stories, validate_stories

app = FastAPI(title="Bilingual Stories")

_settings: Settings | None = None
_log = logging.getLogger("bilingual_stories.api")


def get_settings() -> Settings:
    assert _settings is not None
    return _settings


async def _json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(400, "Request body must be JSON")
    if not isinstance(body, dict):
        raise HTTPException(400, "Request body must be a JSON object")
    return body


@app.on_event("startup")
async def startup():
    global _settings
    if _settings is not None:
        return  # Already initialized (e.g. by tests)
    _settings = load_settings()
    logging.getLogger("bilingual_stories").setLevel(_settings.log_level.upper())


# ── API: Parse ────────────────────────────────────────────────────────────

@app.post("/api/parse")
async def api_parse(request: Request):
    body = await _json_body(request)
    text = body.get("text")
    if not isinstance(text, str):
        raise HTTPException(400, "No text provided")
    result = check_stories(text)
    _log.info(
        "Parse request: %d chars, %d stories, %d errors, %d warnings",
        len(text), len(result.stories), len(result.errors_only), len(result.warnings_only),
    )
    return result.to_dict()


@app.post("/api/validate")
async def api_validate(request: Request):
    body = await _json_body(request)
    raw = body.get("stories")
    if not isinstance(raw, list):
        raise HTTPException(400, "No stories provided")
    try:
        stories = [story_from_dict(s) for s in raw]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise HTTPException(400, f"Invalid story: {e}")
    errors = validate_stories(stories)
    return {"errors": [e.to_dict() for e in errors]}


# ── API: Formats ──────────────────────────────────────────────────────────

@app.get("/api/formats")
async def api_formats():
    return {"title_formats": list(TITLE_FORMATS), **locales.describe()}


# ── API: Settings ─────────────────────────────────────────────────────────

@app.get("/api/settings")
async def api_get_settings():
    return get_settings().to_dict()


@app.put("/api/settings")
async def api_update_settings(request: Request):
    body = await _json_body(request)
    s = get_settings()
    known = {f.name for f in Settings.__dataclass_fields__.values()}
    for k, v in body.items():
        if k in known:
            setattr(s, k, v)
    save_settings(s)
    return s.to_dict()
