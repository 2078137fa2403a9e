"""
Poker Trainer Server - FastAPI HTTP Layer
"""

from pokertrainer.server.app import app, create_app

__all__ = ["app", "create_app"]
