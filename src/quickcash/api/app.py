# src/quickcash/api/app.py
"""
FastAPI application wiring.

Creates the `FastAPI` instance and mounts the routes. Discovery logic lives in
`quickcash.search` and `quickcash.dashboard`.

Run locally with: `uvicorn quickcash.api.app:app --reload`
"""

from __future__ import annotations

import os

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from quickcash.core.logging import configure_logging

from .routes import router

configure_logging()

app = FastAPI(title="QuickCash Nearby API", version="0.1.0")

# CORS for app/web frontends, e.g.
# QUICKCASH_CORS_ORIGINS="http://localhost:8003,http://127.0.0.1:8003"
cors_origins = [s.strip() for s in os.getenv("QUICKCASH_CORS_ORIGINS", "").split(",") if s.strip()]
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(router)
