#!/usr/bin/env python3
"""
Poker Trainer - Server Startup Script

Usage:
    python run.py [--host HOST] [--port PORT] [--reload] [--log-level LEVEL]
"""

import argparse
import os
import uvicorn


def main():
    parser = argparse.ArgumentParser(description="Poker Trainer Server")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--log-level", default=None, help="Log level (default: POKERTRAINER_LOG_LEVEL or INFO)")
    args = parser.parse_args()

    if args.log_level:
        os.environ["POKERTRAINER_LOG_LEVEL"] = args.log_level

    uvicorn.run(
        "pokertrainer.server.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
