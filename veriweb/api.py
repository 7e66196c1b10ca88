"""Main Flask API for VeriWeb.

Run: python -m veriweb.api
"""

import logging
from flask import Flask, request, jsonify
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import redis as redis_lib
from sqlalchemy.exc import SQLAlchemyError

from .app.heuristics import describe_rules
from .app.scanner import analyze
from .config import (
    DEFAULT_RATE_LIMIT,
    HISTORY_LIMIT,
    HISTORY_MAX_LIMIT,
    HISTORY_RATE_LIMIT,
    PORT,
    RATE_LIMIT,
    RATELIMIT_ENABLED,
    REDIS_URL,
    VERSION,
    configure_logging,
    resolve_rules,
)
from .db import init_db, save_scan, list_scans, get_scan

# Logging
configure_logging()
logger = logging.getLogger("api")

# Flask app
app = Flask(__name__)

RULESET_NAME, RULES = resolve_rules()
logger.info("Using '%s' rule set (%d rules)", RULESET_NAME, len(RULES))


def _create_limiter() -> Limiter:
    # Prefer Redis storage in production when REDIS_URL is set and reachable
    if REDIS_URL:
        try:
            redis_lib.from_url(REDIS_URL).ping()
            logger.info("Using Redis at %s for rate limiting", REDIS_URL)
            return Limiter(key_func=get_remote_address, app=app, default_limits=[DEFAULT_RATE_LIMIT],
                           storage_uri=REDIS_URL, enabled=RATELIMIT_ENABLED)
        except (redis_lib.exceptions.RedisError, ValueError):
            logger.exception("Failed to connect to Redis, falling back to in-memory limiter")
    return Limiter(key_func=get_remote_address, app=app, default_limits=[DEFAULT_RATE_LIMIT],
                   enabled=RATELIMIT_ENABLED)


limiter = _create_limiter()

# Initialize scan history table
init_db()


def storable_url(url) -> str:
    """Text form of url that the history store can encode (lone surrogates replaced)."""
    if not isinstance(url, str):
        return ""
    return url.encode("utf-8", "replace").decode("utf-8")


@app.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok", "version": VERSION})


@app.route("/rules", methods=["GET"])
def rules():
    return jsonify({"ruleset": RULESET_NAME, "rules": describe_rules(RULES)})


@app.route("/analyze", methods=["POST"])
@limiter.limit(RATE_LIMIT)
def analyze_url():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or "url" not in data:
        return jsonify({"error": "missing 'url' in JSON body"}), 400

    url = data["url"]
    result = analyze(url, RULES).to_dict()

    # history is best-effort; the classification is returned regardless
    try:
        save_scan(storable_url(url), RULESET_NAME, result)
    except (SQLAlchemyError, UnicodeError):
        logger.exception("Failed to record scan history for %r", url)

    return jsonify(result), 200


@app.route("/history", methods=["GET"])
@limiter.limit(HISTORY_RATE_LIMIT)
def history():
    try:
        limit = int(request.args.get("limit", HISTORY_LIMIT))
        page = int(request.args.get("page", 0))
    except ValueError:
        return jsonify({"error": "limit/page must be integer"}), 400
    limit = min(HISTORY_MAX_LIMIT, max(1, limit))
    offset = max(0, page) * limit
    try:
        rows = list_scans(limit=limit, offset=offset)
    except SQLAlchemyError:
        logger.exception("Failed to read scan history")
        return jsonify({"error": "history_unavailable"}), 503
    return jsonify({"count": len(rows), "rows": rows})


@app.route("/history/<int:scan_id>", methods=["GET"])
@limiter.limit(HISTORY_RATE_LIMIT)
def get_history_item(scan_id: int):
    try:
        item = get_scan(scan_id)
    except SQLAlchemyError:
        logger.exception("Failed to read scan %d", scan_id)
        return jsonify({"error": "history_unavailable"}), 503
    if not item:
        return jsonify({"error": "not_found"}), 404
    return jsonify(item)


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=PORT, debug=False)
