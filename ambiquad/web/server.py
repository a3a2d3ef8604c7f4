from __future__ import annotations

from aiohttp import web

from .handlers import (
    api_ping,
    api_status,
    api_region_get,
    api_region_set,
    api_bands,
    api_colors,
    api_preview,
)


def make_app(daemon) -> web.Application:
    app = web.Application()
    app["daemon"] = daemon

    # API Routes
    app.add_routes([
        # Status
        web.get("/api/status", api_status),

        # Region (drag handles)
        web.get("/api/region", api_region_get),
        web.put("/api/region", api_region_set),
        web.get("/api/bands", api_bands),

        # Sampling
        web.get("/api/colors", api_colors),
        web.get("/api/preview", api_preview),

        # Health check
        web.get("/api/ping", api_ping),
    ])

    return app
