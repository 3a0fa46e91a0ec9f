"""Configuration from environment (and an optional .env file)."""
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Substring scheme: q-gram length range and boundary padding character
Q_MIN = int(os.environ.get("SSE_Q_MIN", 3))
Q_MAX = int(os.environ.get("SSE_Q_MAX", 5))
BOUNDARY_CHAR = os.environ.get("SSE_BOUNDARY_CHAR", "#")

# OXT: occurrence-index cap for test tokens (bounds per-query work)
MAX_OCCURRENCES = int(os.environ.get("SSE_MAX_OCCURRENCES", 2048))

# Key sizes (bytes). AES-256 and HMAC-SHA256 both use 32-byte keys.
KEY_SIZE = int(os.environ.get("SSE_KEY_SIZE", 32))

# CLI state: client key file + persisted index live here
STATE_DIR = Path(os.environ.get("SSE_STATE_DIR", "sse_state"))

LOG_LEVEL = os.environ.get("SSE_LOG_LEVEL", "WARNING").upper()


def _allowed_extensions() -> frozenset:
    raw = os.environ.get("SSE_ALLOWED_EXTENSIONS", ".txt,.md,.csv,.pdf").lower().replace(" ", "")
    parts = [p.strip() for p in raw.split(",") if p.strip()]
    return frozenset(p if p.startswith(".") else f".{p}" for p in parts)


ALLOWED_EXTENSIONS = _allowed_extensions()
