"""REST API exposing the content intelligence engine to the presentation layer."""

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from rich.console import Console

from .api_errors import APIError, ValidationError, error_envelope
from .api_models import (
    AnalyzeRequest,
    APIResponse,
    EnhanceSearchRequest,
    ReadingTimeRequest,
    TextRequest,
)
from .auth import verify_api_key
from .config import Config
from .engine import Engine, build_engine
from .observability import log as obs_log
from .text_utils import calculate_reading_time, generate_excerpt

console = Console()


def get_engine(request: Request) -> Engine:
    """Dependency injection for the process-wide engine."""
    return request.app.state.engine


def create_app(engine: Optional[Engine] = None) -> FastAPI:
    """Build the FastAPI app.

    Args:
        engine: Engine to serve. When omitted one is built from the default
            config file at startup.

    Returns:
        App whose lifespan starts the engine and disposes it on shutdown
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if getattr(app.state, "engine", None) is None:
            app.state.engine = build_engine(Config.from_file())
        await app.state.engine.start()
        try:
            yield
        finally:
            await app.state.engine.close()

    app = FastAPI(
        title="Content Intelligence API",
        description="Search reranking, summaries, sentiment and tags for news articles",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.engine = engine

    @app.middleware("http")
    async def log_requests(request: Request, call_next) -> Response:
        """Log API requests to the console and the event log."""
        if not request.url.path.startswith("/api/"):
            return await call_next(request)

        start_time = time.time()
        response = await call_next(request)
        duration = (time.time() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        console.print(
            f"[dim]   📡 API: {request.method} {request.url.path} from {client_ip} "
            f"→ {response.status_code} ({duration:.0f}ms)[/dim]"
        )
        obs_log(
            "api.request",
            method=request.method,
            path=request.url.path,
            client_ip=client_ip,
            status_code=response.status_code,
            duration_ms=int(duration),
        )
        return response

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.envelope())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Render validation errors in the standard envelope."""
        first_error = exc.errors()[0]
        field = " -> ".join(str(loc) for loc in first_error["loc"])

        return JSONResponse(
            status_code=422,
            content=error_envelope(
                f"Validation error in {field}: {first_error['msg']}"
            ),
        )

    @app.get("/health")
    async def health(engine: Engine = Depends(get_engine)) -> APIResponse:
        return APIResponse(success=True, message="ok", data=engine.status())

    @app.post("/api/search/enhance", dependencies=[Depends(verify_api_key)])
    async def enhance_search(
        request: EnhanceSearchRequest, engine: Engine = Depends(get_engine)
    ) -> APIResponse:
        """Rerank candidate articles by similarity to the query."""
        articles = [article.model_dump(exclude_unset=True) for article in request.articles]
        results = await engine.search.enhance_search_results(request.query, articles)

        if request.cache_query and request.query.strip():
            await engine.search.cache_search_query(request.query)

        enhanced = bool(results) and all(
            isinstance(item, dict) and item.get("search_enhanced") for item in results
        )
        return APIResponse(
            success=True,
            message=f"Ranked {len(results)} articles",
            data={"items": results, "enhanced": enhanced, "total": len(results)},
        )

    @app.get("/api/search/similar", dependencies=[Depends(verify_api_key)])
    async def similar_queries(
        q: str = Query(..., description="Query to find neighbours for"),
        limit: Optional[int] = Query(None, ge=1, le=50),
        engine: Engine = Depends(get_engine),
    ) -> APIResponse:
        if not q.strip():
            raise ValidationError("Query parameter q cannot be blank")
        queries = engine.search.get_similar_queries(q, limit)
        return APIResponse(
            success=True,
            message=f"Found {len(queries)} similar queries",
            data={"queries": queries},
        )

    @app.post("/api/summarize", dependencies=[Depends(verify_api_key)])
    async def summarize(
        request: TextRequest, engine: Engine = Depends(get_engine)
    ) -> APIResponse:
        result = await engine.intelligence.summarize(request.text, request.max_length)
        return APIResponse(
            success=True,
            message="Summary generated",
            data={"summary": result.value, "source": result.source},
        )

    @app.post("/api/excerpt", dependencies=[Depends(verify_api_key)])
    async def excerpt(
        request: TextRequest, engine: Engine = Depends(get_engine)
    ) -> APIResponse:
        max_length = request.max_length or engine.config.excerpt_max_length
        return APIResponse(
            success=True,
            message="Excerpt generated",
            data={"excerpt": generate_excerpt(request.text, max_length)},
        )

    @app.post("/api/reading-time", dependencies=[Depends(verify_api_key)])
    async def reading_time(
        request: ReadingTimeRequest, engine: Engine = Depends(get_engine)
    ) -> APIResponse:
        wpm = request.words_per_minute or engine.config.words_per_minute
        minutes = calculate_reading_time(request.text, wpm)
        return APIResponse(
            success=True,
            message=f"{minutes} min read",
            data={"minutes": minutes, "words_per_minute": wpm},
        )

    @app.post("/api/sentiment", dependencies=[Depends(verify_api_key)])
    async def sentiment(
        request: TextRequest, engine: Engine = Depends(get_engine)
    ) -> APIResponse:
        result = await engine.intelligence.sentiment(request.text)
        return APIResponse(
            success=True,
            message=f"Sentiment: {result.value.label.value}",
            data=result.value.to_dict(),
        )

    @app.post("/api/analyze", dependencies=[Depends(verify_api_key)])
    async def analyze(
        request: AnalyzeRequest, engine: Engine = Depends(get_engine)
    ) -> APIResponse:
        analysis = await engine.intelligence.analyze_article(
            request.content, request.title
        )
        return APIResponse(
            success=True, message="Article analyzed", data=analysis.to_dict()
        )

    return app
