"""
Runtime configuration.

Everything is read from the environment once at import time. main.py loads a
.env file (python-dotenv) before importing this module, so values placed in
.env behave exactly like real environment variables:

  LOG_LEVEL=DEBUG
  MODEL_SCHEMA_VERSION=1.0.0
  SEED_DEFAULT_DEFINITIONS=false
  CORS_ORIGINS=http://localhost:3000,http://localhost:3001
"""

import os


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Literal schema version stamped on every synthesized application model
MODEL_SCHEMA_VERSION = os.environ.get("MODEL_SCHEMA_VERSION", "1.0.0")

SEED_DEFAULT_DEFINITIONS = _env_flag("SEED_DEFAULT_DEFINITIONS", True)

CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "CORS_ORIGINS", "http://localhost:3000,http://localhost:3001"
    ).split(",")
    if origin.strip()
]
