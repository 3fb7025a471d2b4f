"""FastAPI application: add, list, delete entries and serve the Atom feed."""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from .auth import require_write_token
from .schemas import AddEntryRequest, EntryResponse, ListEntriesResponse
from ..config.settings import Settings, settings as default_settings
from ..feed.atom import ATOM_CONTENT_TYPE, FeedSerializer
from ..ingestion.fetcher import PageFetcher
from ..ingestion.interfaces import ResolverInterface
from ..ingestion.oembed import VideoOEmbedClient
from ..ingestion.resolver import ContentMetadataResolver
from ..pipeline.intake import EntryIntake
from ..retention.scheduler import RetentionPolicy, RetentionScheduler
from ..storage.database import EntryStore
from ..storage.interfaces import StorageError

logger = structlog.get_logger()


def build_resolver(config: Settings) -> ContentMetadataResolver:
    """Resolver wired with the configured timeout, user agent and content mode."""
    return ContentMetadataResolver(
        fetcher=PageFetcher(config.fetch_timeout_seconds, config.user_agent),
        oembed=VideoOEmbedClient(
            timeout_seconds=config.fetch_timeout_seconds,
            user_agent=config.user_agent,
        ),
        content_mode=config.content_mode,
    )


def create_app(
    config: Optional[Settings] = None,
    store: Optional[EntryStore] = None,
    resolver: Optional[ResolverInterface] = None,
) -> FastAPI:
    """Build the application. Store and resolver default to ones built from config."""
    config = config or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        entry_store = store or EntryStore(config.database_url)
        entry_resolver = resolver or build_resolver(config)
        retention = RetentionScheduler(
            entry_store,
            RetentionPolicy(config.retention_days, config.max_entries),
            interval_hours=config.retention_interval_hours,
        )

        app.state.store = entry_store
        app.state.resolver = entry_resolver
        app.state.intake = EntryIntake(entry_store, entry_resolver)
        app.state.serializer = FeedSerializer(config.content_mode)
        app.state.retention = retention

        retention.start()
        logger.info("app_started", base_url=config.base_url, content_mode=config.content_mode.value)
        try:
            yield
        finally:
            # The in-flight cleanup finishes before the pool goes away
            await retention.stop()
            await entry_resolver.close()
            entry_store.close()
            logger.info("app_stopped")

    app = FastAPI(title="Laterfeed", lifespan=lifespan)
    app.state.settings = config

    if config.cors_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_allowed_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("request_failed", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=500, content={"message": "Internal storage error"})

    @app.get("/health")
    def health(request: Request):
        """Health check endpoint for load balancers."""
        return {"status": "ok", "entries": request.app.state.store.count()}

    @app.post(
        "/entries",
        status_code=201,
        response_model=EntryResponse,
        dependencies=[Depends(require_write_token)],
    )
    async def add_entry(body: AddEntryRequest, request: Request):
        entry = await request.app.state.intake.add(
            body.url,
            title=body.title,
            summary=body.summary,
            source_type=body.source_type,
        )
        return EntryResponse.from_entry(entry)

    @app.get("/entries", response_model=ListEntriesResponse)
    def list_entries(request: Request):
        entries = request.app.state.store.fetch_all()
        return ListEntriesResponse(entries=[EntryResponse.from_entry(e) for e in entries])

    @app.delete(
        "/entries/{entry_id}",
        status_code=204,
        dependencies=[Depends(require_write_token)],
    )
    def delete_entry(entry_id: int, request: Request):
        if not request.app.state.store.delete_by_id(entry_id):
            raise HTTPException(status_code=404, detail="Entry not found")
        return Response(status_code=204)

    @app.get("/feed")
    async def get_feed(request: Request):
        state = request.app.state
        entries = await run_in_threadpool(state.store.fetch_latest, config.feed_entry_limit)
        xml = state.serializer.render(entries, config.base_url)
        return Response(content=xml, media_type=ATOM_CONTENT_TYPE)

    return app
