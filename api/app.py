"""
Module 09D - FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import json
import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import health, distributions, proofs, redemption, ledger
from api.errors import (
    APIError,
    api_error_handler,
    distributor_error_handler,
    generic_error_handler,
)
from core.schemas.errors import DistributorException


# Level from DISTRIBUTOR_LOG_LEVEL, else distributor.json log_level
def _resolve_log_level() -> int:
    """Resolve log level from env var or distributor.json, defaulting to INFO."""
    raw = os.getenv("DISTRIBUTOR_LOG_LEVEL")
    if raw is None:
        cfg_path = Path.cwd() / "distributor.json"
        if cfg_path.exists():
            try:
                with open(cfg_path) as f:
                    raw = json.load(f).get("log_level")
            except (OSError, ValueError):
                raw = None
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Merkle Distributor API",
        description="""
HTTP API for committing token distributions to a Merkle root and redeeming them.

## Endpoints

- **POST /distributions** - Build root + per-token claims with proofs
- **POST /proofs/verify** - Verify a proof against a root
- **GET /merkle-root** - Currently published root
- **PUT /merkle-root** - Replace the root (operator only)
- **POST /claims** - Claim the unpaid part of a cumulative entitlement
- **GET /claimed/{account}/{token}** - Amount already claimed
- **POST /ledger/mint** - Fund the distributor (operator only)
- **GET /balances/{token}/{holder}** - Ledger balance
- **GET /health** - Health check

## Caller identity

Claim and root-update calls take the caller from the `X-Caller` header,
set by the fronting authentication layer.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(DistributorException, distributor_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(distributions.router)
    app.include_router(proofs.router)
    app.include_router(redemption.router)
    app.include_router(ledger.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
