# adapters/web/api_v1_blueprint.py
# REST API Blueprint for programmatic access.

import os
from functools import wraps
from flask import Blueprint, request, jsonify

api_v1 = Blueprint('api_v1', __name__, url_prefix='/api/v1')

# Simple API Key auth
def require_api_key(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        # API_KEY unset means the API is open (local use)
        expected_key = os.environ.get("API_KEY")
        if expected_key:
            auth_header = request.headers.get("Authorization")
            if not auth_header or not auth_header.startswith("Bearer "):
                return jsonify({"error": "Unauthorized. Missing Bearer token."}), 401
            token = auth_header.split(" ", 1)[1]
            if token != expected_key:
                return jsonify({"error": "Unauthorized. Invalid API key."}), 403
        return f(*args, **kwargs)
    return decorated

@api_v1.route('/trim', methods=['POST'])
@require_api_key
def api_trim():
    """
    POST /api/v1/trim
    Expects multipart/form-data with 'file'.
    Returns the trimmed WAV or a skipped/error JSON body.
    """
    from server import trim_upload
    return trim_upload()
