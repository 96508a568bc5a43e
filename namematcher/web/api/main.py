"""FastAPI application for the name matcher."""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Dict, List, Optional
import asyncio
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ...core.errors import EncodingError, StoreError, ValidationError
from ...core.models import MatchQuery
from ...matching.engine import NameMatchingEngine
from ...utils.config import NameMatcherConfig
from ...validation.requests import pair_names, parse_name_list, split_name_field

logger = logging.getLogger(__name__)


# Pydantic models for API
class NameQuery(BaseModel):
    first: str = ''
    last: str = ''


class MatchResultResponse(BaseModel):
    original: NameQuery
    first: List[str]
    last: List[str]


class AddNamesForm(BaseModel):
    """Comma-separated first and last names, paired by position."""
    first: Optional[str] = None
    last: Optional[str] = None


class AddNamesRequest(BaseModel):
    first: List[str]
    last: List[str]


class AddNamesResponse(BaseModel):
    status: str
    added: int


class RefreshResponse(BaseModel):
    status: str
    names: Dict[str, int]


def get_engine(request: Request) -> NameMatchingEngine:
    """Get the engine, refusing traffic until the corpus is loaded."""
    engine: NameMatchingEngine = request.app.state.engine
    if not engine.is_ready:
        raise HTTPException(status_code=503, detail="failure: name matcher not ready")
    return engine


def _match(engine: NameMatchingEngine, queries: List[MatchQuery]) -> List[Dict]:
    return [result.to_dict() for result in engine.match_names(queries)]


async def _read_add_form(request: Request) -> AddNamesForm:
    """Read first/last fields from a JSON or form-encoded body."""
    content_type = request.headers.get('content-type', '')
    if content_type.startswith('application/json'):
        try:
            data = await request.json()
        except ValueError:
            raise ValidationError("failure: malformed JSON body") from None
        if not isinstance(data, dict):
            raise ValidationError("failure: no names")
    else:
        data = await request.form()

    fields = {}
    for key in ('first', 'last'):
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"failure: {key} must be a comma-separated string")
        fields[key] = value
    return AddNamesForm(**fields)


async def _add_pairs(engine: NameMatchingEngine, pairs) -> AddNamesResponse:
    """Add every pair, reporting which names and halves failed to store."""
    failed = []
    for first, last in pairs:
        try:
            await engine.add_name(first, last)
        except StoreError as e:
            failed.append({'first': first, 'last': last, 'part': e.category, 'error': str(e)})

    if failed:
        raise HTTPException(
            status_code=503,
            detail={'message': 'failure: could not store names', 'failed': failed},
        )
    return AddNamesResponse(status='success', added=len(pairs))


def create_app(
    config: Optional[NameMatcherConfig] = None,
    engine: Optional[NameMatchingEngine] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    The corpus is loaded during application startup, so the server only
    accepts traffic once the engine is ready.

    Args:
        config: Service configuration (defaults if None)
        engine: Engine to serve (built from config if None)

    Returns:
        FastAPI application
    """
    config = config or NameMatcherConfig()
    engine = engine or NameMatchingEngine.from_config(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            await asyncio.wait_for(app.state.engine.start(), config.ready_timeout)
        except (StoreError, asyncio.TimeoutError) as e:
            logger.error(f"Name matcher failed to become ready: {e!r}")
            raise
        yield
        await app.state.engine.close()

    app = FastAPI(
        title="Name Matcher API",
        description="Fuzzy matching of first and last names against a known-name corpus",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.state.config = config

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={'detail': str(exc)})

    @app.exception_handler(EncodingError)
    async def encoding_error_handler(request: Request, exc: EncodingError):
        return JSONResponse(status_code=400, content={'detail': f"failure: {exc}"})

    # Routes
    @app.get("/api/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        engine: NameMatchingEngine = request.app.state.engine
        return {
            "status": "healthy" if engine.is_ready else "starting",
            "ready": engine.is_ready,
            "environment": engine.environment.value,
            "names": engine.stats(),
            "timestamp": datetime.now().isoformat(),
        }

    @app.post("/api/match", response_model=List[MatchResultResponse])
    async def match_names(queries: List[NameQuery], request: Request):
        """Match a batch of first/last name pairs."""
        engine = get_engine(request)
        return _match(engine, [MatchQuery(first=q.first, last=q.last) for q in queries])

    @app.post("/api/names", response_model=AddNamesResponse)
    async def add_names(body: AddNamesRequest, request: Request):
        """Add names given as parallel first/last lists."""
        engine = get_engine(request)
        return await _add_pairs(engine, pair_names(body.first, body.last))

    if config.admin_enabled:
        @app.post("/api/admin/refresh", response_model=RefreshResponse)
        async def refresh_names(request: Request):
            """Reload the corpus from the persistent store (operators only)."""
            engine: NameMatchingEngine = request.app.state.engine
            try:
                await engine.refresh()
            except StoreError as e:
                raise HTTPException(status_code=503, detail=f"failure: refresh failed: {e}")
            return RefreshResponse(status='success', names=engine.stats())

    @app.post("/", response_model=AddNamesResponse)
    async def add_names_form(request: Request):
        """Add names given as comma-separated first/last fields (form or JSON)."""
        engine = get_engine(request)
        body = await _read_add_form(request)
        if body.first is None or body.last is None:
            raise ValidationError("failure: no names")
        pairs = pair_names(split_name_field(body.first), split_name_field(body.last))
        return await _add_pairs(engine, pairs)

    @app.get("/{names}", response_model=List[MatchResultResponse])
    async def match_names_path(names: str, request: Request):
        """Match names given as 'first,last:first,last'."""
        engine = get_engine(request)
        return _match(engine, parse_name_list(names))

    return app
