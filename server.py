# server.py
import os
import logging

from flask import Flask, request, jsonify, Response
from flask_cors import CORS

from extractor.core import TrimOutcome, trim_to_loudest_segment
from extractor.errors import InvalidArgumentError
from extractor.utils import DEFAULT_PARAMS, PARAM_RANGES

# ── Logging ──────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger("extract_loudest")

# ── Flask app ────────────────────────────────────────────────────────
app = Flask(__name__)

# Upload size limit (100 MB hard cap)
MAX_UPLOAD_BYTES: int = 100 * 1024 * 1024
app.config["MAX_CONTENT_LENGTH"] = MAX_UPLOAD_BYTES

CORS(app, resources={
    r"/trim": {"origins": ["http://localhost:5000", "http://127.0.0.1:5000"]},
})

app.config["SECRET_KEY"] = os.environ.get("FLASK_SECRET_KEY") or os.urandom(32)

# ── API Blueprint Registration ─────────────────────────────────────────
from adapters.web.api_v1_blueprint import api_v1
app.register_blueprint(api_v1)

import adapters.web.openapi_spec as openapi_spec
@app.route("/api/v1/openapi.json")
def get_openapi_spec():
    return jsonify(openapi_spec.OPENAPI_SPEC)

# ════════════════════════════════════════════════════════════════════
# Helpers
# ════════════════════════════════════════════════════════════════════

WAV_MAGIC_BYTES: bytes = b"RIFF"


def _safe_number(value, default: float, min_v: float, max_v: float, cast=float) -> float:
    """Parse a number from form input, clamp to valid range, never raise."""
    try:
        v = cast(value)
    except (TypeError, ValueError):
        return default
    return max(min_v, min(max_v, v))


# ════════════════════════════════════════════════════════════════════
# Routes
# ════════════════════════════════════════════════════════════════════

@app.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok"})


@app.route("/trim", methods=["POST"])
def trim_upload():
    """
    POST /trim
    Form fields:
      - file       : 16-bit PCM WAV file (multipart)
      - length_ms  : int, segment length in milliseconds
      - min_volume : float, average-volume gate
    Returns: the trimmed mono WAV, or { status: "skipped", averageVolume }
    """
    if "file" not in request.files:
        return jsonify({"error": "No file uploaded."}), 400

    wav_data: bytes = request.files["file"].read()
    if not wav_data:
        return jsonify({"error": "Empty file uploaded."}), 400
    if not wav_data.startswith(WAV_MAGIC_BYTES):
        logger.warning(
            "upload rejected ip=%s reason=invalid_magic_bytes", request.remote_addr
        )
        return jsonify({"error": "Unsupported or invalid audio file."}), 415

    length_ms = _safe_number(
        request.form.get("length_ms"), DEFAULT_PARAMS["length_ms"],
        *PARAM_RANGES["length_ms"], cast=int,
    )
    min_volume = _safe_number(
        request.form.get("min_volume"), DEFAULT_PARAMS["min_volume"],
        *PARAM_RANGES["min_volume"],
    )

    try:
        outcome: TrimOutcome = trim_to_loudest_segment(wav_data, int(length_ms), min_volume)
    except InvalidArgumentError as e:
        logger.info("upload rejected ip=%s reason=%s", request.remote_addr, e.reason.value)
        return jsonify({"error": e.message, "reason": e.reason.value}), 400

    if not outcome.saved:
        logger.info("upload skipped as too quiet (%.6f)", outcome.average_volume)
        return jsonify({
            "status": "skipped",
            "averageVolume": outcome.average_volume,
        }), 200

    logger.info(
        "upload trimmed size=%dB rate=%d channels=%d start=%d",
        len(wav_data), outcome.metadata.sample_rate,
        outcome.metadata.channel_count, outcome.start_frame,
    )
    response = Response(outcome.wav_bytes, mimetype="audio/wav")
    response.headers["X-Average-Volume"] = f"{outcome.average_volume:.6f}"
    response.headers["X-Start-Frame"] = str(outcome.start_frame)
    return response


# ════════════════════════════════════════════════════════════════════
# Error handlers & Security headers
# ════════════════════════════════════════════════════════════════════

@app.errorhandler(413)
def request_entity_too_large(e):
    return jsonify({"error": "File too large. Maximum size is 100 MB."}), 413


@app.errorhandler(404)
def not_found(e):
    return jsonify({"error": "Not found."}), 404


@app.errorhandler(Exception)
def handle_exception(e):
    """Generic handler. Internal details never reach the client."""
    logger.error("unhandled exception: %s", e, exc_info=True)
    return jsonify({"error": "An internal error occurred."}), 500


@app.after_request
def set_security_headers(response):
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
    response.headers["Referrer-Policy"] = "no-referrer"
    return response


# ════════════════════════════════════════════════════════════════════
# Entry point
# ════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    debug_mode = os.environ.get("FLASK_DEBUG", "false").lower() == "true"
    app.run(debug=debug_mode, port=5000)
