"""Settings API — read and update publishing configuration."""

from flask import Blueprint, jsonify, request

from services.settings import load_settings, save_settings, validate_settings

bp = Blueprint("settings", __name__)


@bp.route("/api/settings", methods=["GET"])
def get_settings():
    """Return current settings merged with defaults."""
    return jsonify(load_settings())


@bp.route("/api/settings", methods=["POST"])
def update_settings():
    """Validate and persist the known keys of the request body."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Body must be a JSON object"}), 400

    settings = load_settings()
    updates = {k: v for k, v in data.items() if k in settings}

    errors = validate_settings(updates)
    if errors:
        return jsonify({"error": errors[0], "validation_errors": errors}), 400

    # Strip surrounding whitespace from names and paths
    for key in ("source_dir", "posts_dir", "pages_dir", "post_layout", "page_layout"):
        if key in updates:
            updates[key] = updates[key].strip()

    settings.update(updates)
    save_settings(settings)
    return jsonify(settings)
