# main.py
"""ASGI entry point: `uvicorn main:app`."""

import sys
from dotenv import load_dotenv
from common.config import initialize_config
from common.api_error import ConfigurationError
from app.application import create_app

load_dotenv()
try:
    config = initialize_config()
except ConfigurationError as e:
    # structlog is not configured yet
    print(f"FATAL: Configuration error:\n{e}", file=sys.stderr)
    sys.exit(1)

app = create_app(config)

__all__ = ["app", "config"]
