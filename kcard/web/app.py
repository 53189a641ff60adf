"""FastAPI application serving the latest card at a fixed path."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI, HTTPException, Response

from kcard.adapters.publisher_memory import CardPublisher


def create_app(
    publisher: CardPublisher,
    *,
    on_startup: Optional[Callable[[], None]] = None,
    on_shutdown: Optional[Callable[[], None]] = None,
) -> FastAPI:
    """Build the read-only app; ``on_startup``/``on_shutdown`` hook the scheduler."""
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if on_startup is not None:
            on_startup()
        try:
            yield
        finally:
            if on_shutdown is not None:
                on_shutdown()

    app = FastAPI(title="kcard", version="0.1.0", lifespan=lifespan)

    @app.get(publisher.path)
    def card() -> Response:
        current = publisher.current()
        if current is None:
            raise HTTPException(404, "No card rendered yet")
        return Response(content=current.data, media_type=current.content_type)

    return app


__all__ = ["create_app"]
