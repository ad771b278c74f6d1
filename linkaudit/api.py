"""Main Flask API for LinkAudit.

Run: python -m linkaudit.api
"""

import logging
import os

import redis as redis_lib
from flask import Flask, Response, abort, jsonify, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from linkaudit import __version__, config, db
from linkaudit.app.report import explain, to_dict
from linkaudit.app.scanner import Analyzer
from linkaudit.config import DEMO_LINKS, Mode
from linkaudit.content_fetcher import fetch_page_text
from linkaudit.errors import ContentFetchFailed, InvalidUrl
from linkaudit.app.url_parts import decompose

# Logging
logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger("api")

# Flask app
app = Flask(__name__)

# Rate limiter: prefer Redis storage in production when REDIS_URL is set
if config.REDIS_URL:
    try:
        redis_lib.from_url(config.REDIS_URL).ping()
        limiter = Limiter(app=app, key_func=get_remote_address,
                          default_limits=["60 per minute"], storage_uri=config.REDIS_URL)
        logger.info("Using Redis at %s for rate limiting", config.REDIS_URL)
    except redis_lib.RedisError:
        logger.exception("Failed to connect to Redis, falling back to in-memory limiter")
        limiter = Limiter(app=app, key_func=get_remote_address,
                          default_limits=["60 per minute"], storage_uri="memory://")
else:
    limiter = Limiter(app=app, key_func=get_remote_address,
                      default_limits=["60 per minute"], storage_uri="memory://")

if config.API_KEY:
    logger.info("API key enabled")

analyzer = Analyzer()

# Initialize DB
db.init_db()


def require_api_key() -> None:
    if not config.API_KEY:
        return
    key = request.headers.get("X-API-Key") or request.args.get("api_key")
    if not key or key != config.API_KEY:
        abort(401, description="Invalid or missing API key")


def _url_from_body():
    data = request.get_json(silent=True)
    if not data or "url" not in data:
        return None, (jsonify({"error": "missing 'url' in JSON body"}), 400)
    url = str(data["url"]).strip()
    if not url:
        return None, (jsonify({"error": "empty url"}), 400)
    return url, None


@app.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok", "version": __version__})


@app.route("/demo", methods=["GET"])
def demo():
    return jsonify({"links": list(DEMO_LINKS)})


@app.route("/analyze", methods=["POST"])
@limiter.limit("30 per minute")
def analyze():
    require_api_key()
    url, error = _url_from_body()
    if error:
        return error
    data = request.get_json(silent=True)

    try:
        mode = Mode(data.get("mode") or config.DEFAULT_MODE.value)
    except ValueError:
        return jsonify({"error": "invalid mode", "detail": "mode must be 'light' or 'full'"}), 400

    try:
        result = analyzer.analyze_sync(url, mode)
    except InvalidUrl as e:
        return jsonify({"error": "invalid_url", "detail": e.reason}), 400
    except Exception as e:
        logger.exception("Analysis failed: %s", e)
        return jsonify({"error": "analysis_failed", "detail": str(e)}), 500

    analysis_id = None
    if data.get("save", True):
        analysis_id = db.save_analysis(result)

    return jsonify({
        "analysis_id": analysis_id,
        "result": to_dict(result),
        "explanations": explain(result),
    }), 200


@app.route("/fetch-content", methods=["POST"])
@limiter.limit("20 per minute")
def fetch_content():
    """Plain-text page content, the service behind full-mode analyses."""
    require_api_key()
    url, error = _url_from_body()
    if error:
        return error
    try:
        href = decompose(url).href
    except InvalidUrl:
        return jsonify({"error": "Invalid URL provided."}), 400

    try:
        text = fetch_page_text(href)
    except ContentFetchFailed as e:
        logger.warning("fetch-content failed for %s: %s", href, e.reason)
        return jsonify({"error": f"Failed to fetch content from target URL: {e.reason}"}), 502
    return Response(text, status=200, mimetype="text/plain")


@app.route("/history", methods=["GET"])
@limiter.limit("20 per minute")
def history():
    require_api_key()
    try:
        limit = int(request.args.get("limit", 50))
        page = int(request.args.get("page", 0))
    except ValueError:
        return jsonify({"error": "limit/page must be integer"}), 400
    limit = min(200, max(1, limit))
    offset = max(0, page) * limit
    rows = db.list_analyses(limit=limit, offset=offset)
    return jsonify({"count": len(rows), "rows": rows})


@app.route("/history", methods=["DELETE"])
def clear_history():
    require_api_key()
    deleted = db.clear_history()
    return jsonify({"deleted": deleted})


@app.route("/history/<int:analysis_id>", methods=["GET"])
@limiter.limit("20 per minute")
def get_history_item(analysis_id: int):
    require_api_key()
    item = db.get_analysis(analysis_id)
    if not item:
        return jsonify({"error": "not_found"}), 404
    return jsonify(item)


@app.route("/history/<int:analysis_id>", methods=["DELETE"])
def delete_history_item(analysis_id: int):
    require_api_key()
    if not db.delete_analysis(analysis_id):
        return jsonify({"error": "not_found"}), 404
    return jsonify({"deleted": analysis_id})


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", 5050)), debug=False)
