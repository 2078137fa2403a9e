"""
FastAPI Application Entry Point for the Poker Trainer.

This module creates and configures the FastAPI application with:
- HTTP routes for training sessions
- Stateless evaluation, probability and showdown routes
- CORS middleware for a browser front end
"""

import os
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pokertrainer import __version__
from pokertrainer.server.routes import router

# Root logger level comes from POKERTRAINER_LOG_LEVEL (run.py --log-level)
logging.basicConfig(
    level=os.environ.get("POKERTRAINER_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    
    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="Poker Trainer",
        description="Texas Hold'em win probability training API",
        version=__version__,
    )
    
    # Browser front ends are served from other origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    # Session, leaderboard and stateless routes
    app.include_router(router)
    
    @app.on_event("startup")
    async def startup_event():
        logger.info("Poker Trainer server starting up...")
    
    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Poker Trainer server shutting down...")
    
    return app


# Create the application instance
app = create_app()


def main():
    """Run the server (for use as entry point)."""
    import uvicorn
    uvicorn.run(
        "pokertrainer.server.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
