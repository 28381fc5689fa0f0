#!/usr/bin/env python3
"""
Command-line helpers for the Products API.

  python -m app.cli token --user-id 42
  python -m app.cli serve --port 8000
"""

import argparse
import sys
from datetime import timedelta
from typing import List, Optional

from app.core.config import get_settings
from app.core.security import create_access_token


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Products API utilities")
    subparsers = parser.add_subparsers(dest="command", required=True)

    token = subparsers.add_parser("token", help="Print a signed bearer token for a user id")
    token.add_argument("--user-id", type=int, required=True, help="Subject user id")
    token.add_argument(
        "--expire-minutes",
        type=int,
        default=None,
        help="Token lifetime (default: JWT_EXPIRE_MINUTES)"
    )

    serve = subparsers.add_parser("serve", help="Run the API with uvicorn")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = get_settings()

    if args.command == "token":
        expires = timedelta(minutes=args.expire_minutes) if args.expire_minutes is not None else None
        print(create_access_token(args.user_id, settings, expires_delta=expires))
        return 0

    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=args.host,
        port=args.port,
        reload=settings.environment == "local",
        log_config=None
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
