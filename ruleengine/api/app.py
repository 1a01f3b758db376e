"""
FastAPI application — local rules engine API.
Runs on http://127.0.0.1:8765 by default.

The loaded rule set, engine parameters and random source live on app.state
so that each call to create_app() produces a fully independent instance
with no shared module-level globals. This makes test isolation straightforward.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request

from ..config import config
from ..core.gate import make_random_source
from ..core.parameters import RulesEngineParameters
from ..core.rules import Rules
from ..loader.factory import RuleFactory

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan — initialises all per-app state
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.factory = RuleFactory()
    app.state.parameters = RulesEngineParameters.from_config(config)
    app.state.random_source = make_random_source(config.random_seed)

    rules_file = app.state.rules_file
    if rules_file:
        app.state.rules = app.state.factory.create_rules_from_path(rules_file)
        logger.info("Loaded %d rules from %s", len(app.state.rules), rules_file)
    else:
        app.state.rules = Rules()

    yield


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app(rules_file: Optional[str] = None) -> FastAPI:
    app = FastAPI(
        title="Rules Engine",
        description="Fire prioritised, probabilistic rules against posted facts",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.rules_file = rules_file or config.rules_file

    from .routers import evaluation, rules

    app.include_router(rules.router)
    app.include_router(evaluation.router)

    @app.get("/health")
    def health(request: Request):
        loaded = getattr(request.app.state, "rules", None)
        return {"status": "ok", "rules": len(loaded) if loaded is not None else 0}

    return app


app = create_app()
