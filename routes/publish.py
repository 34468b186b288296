"""Publishing endpoints: single file, bulk posts/pages, metadata preview, article listing."""

import os

from flask import Blueprint, jsonify, request

from services.frontmatter import render
from services.publisher import Dispatcher, Kind
from services.reader import MetadataReader
from services.settings import build_config, load_settings
from services.site import SiteWriter, safe_path

bp = Blueprint("publish", __name__)


def _config():
    """Return (PublishConfig, None) or (None, error response)."""
    try:
        return build_config(load_settings()), None
    except ValueError as e:
        return None, (jsonify({"error": str(e)}), 500)


def _resolve(cfg, rel_path: str):
    """Return (abs_path, None) or (None, error response) for a source-relative path."""
    abs_path, err = safe_path(rel_path, cfg.source_dir)
    if err:
        return None, (jsonify({"error": err}), 403)
    if not os.path.isfile(abs_path):
        return None, (jsonify({"error": "File not found"}), 404)
    return abs_path, None


def _publish_all(kind: Kind):
    cfg, err = _config()
    if err:
        return err
    outcomes = Dispatcher(cfg).publish_all(kind)
    return jsonify(
        {
            "published": sum(1 for o in outcomes if o.ok),
            "failed": sum(1 for o in outcomes if not o.ok),
            "results": [
                {
                    "path": os.path.relpath(o.path, cfg.source_dir),
                    "message": o.message,
                    "ok": o.ok,
                }
                for o in outcomes
            ],
        }
    )


@bp.route("/api/publish/posts", methods=["POST"])
def publish_posts():
    """Publish every post in the source tree."""
    return _publish_all(Kind.POST)


@bp.route("/api/publish/pages", methods=["POST"])
def publish_pages():
    """Publish every page in the source tree."""
    return _publish_all(Kind.PAGE)


@bp.route("/api/publish/<path:rel_path>", methods=["POST"])
def publish_file(rel_path):
    """Publish one source file. The status message is returned as-is."""
    cfg, err = _config()
    if err:
        return err
    abs_path, err = _resolve(cfg, rel_path)
    if err:
        return err
    return jsonify({"path": rel_path, "message": Dispatcher(cfg).dispatch(abs_path)})


@bp.route("/api/metadata/<path:rel_path>")
def metadata_preview(rel_path):
    """Transcoded metadata and rendered front matter, without publishing."""
    cfg, err = _config()
    if err:
        return err
    abs_path, err = _resolve(cfg, rel_path)
    if err:
        return err

    try:
        metadata, read_err = MetadataReader(cfg).read(abs_path)
    except (OSError, UnicodeDecodeError) as e:
        return jsonify({"error": f"Cannot read '{rel_path}': {e}"}), 422
    if read_err:
        return jsonify({"error": read_err}), 422
    return jsonify({"path": rel_path, "metadata": metadata, "front_matter": render(metadata)})


@bp.route("/api/articles")
def list_articles():
    """Source files with the given layout (defaults to the post layout)."""
    cfg, err = _config()
    if err:
        return err
    layout = request.args.get("layout", "").strip() or cfg.post_layout
    paths = SiteWriter(cfg).list_base_files(layout)
    return jsonify(
        {
            "layout": layout,
            "files": [os.path.relpath(p, cfg.source_dir).replace(os.sep, "/") for p in paths],
        }
    )
