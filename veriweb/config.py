"""
Runtime configuration for VeriWeb.

All values come from environment variables so they can be overridden in
deployment without code changes.
"""

import logging
import os

from .app.heuristics import RULE_SETS

logger = logging.getLogger("config")

VERSION = "1.0"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Rule set used by the HTTP API: "default" or "extended"
RULESET = os.getenv("VERIWEB_RULESET", "default").strip().lower()

# Scan history storage (SQLite)
DB_FILE = os.getenv("VERIWEB_DB", "veriweb.db")
HISTORY_LIMIT = int(os.getenv("VERIWEB_HISTORY_LIMIT", "5"))
HISTORY_MAX_LIMIT = 200

# Rate limiting; REDIS_URL switches the limiter to Redis storage
DEFAULT_RATE_LIMIT = os.getenv("VERIWEB_DEFAULT_RATE_LIMIT", "60 per minute")
RATE_LIMIT = os.getenv("VERIWEB_RATE_LIMIT", "30 per minute")
HISTORY_RATE_LIMIT = os.getenv("VERIWEB_HISTORY_RATE_LIMIT", "20 per minute")
RATELIMIT_ENABLED = os.getenv("VERIWEB_RATELIMIT_ENABLED", "true").strip().lower() not in ("0", "false", "no")
REDIS_URL = os.getenv("REDIS_URL")

PORT = int(os.getenv("PORT", "5050"))


def configure_logging(level: str = None) -> None:
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def resolve_rules(name: str = None):
    """Return the (name, rules) pair for a rule set name; unknown names fall back to default."""
    name = (name or RULESET).strip().lower()
    if name not in RULE_SETS:
        logger.warning("Unknown rule set %r, using 'default'", name)
        name = "default"
    return name, RULE_SETS[name]
