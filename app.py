#!/usr/bin/env python3
"""orgpress server — REST API for publishing header-annotated documents to a site tree."""

import argparse
import logging

from flask import Flask

from config import PORT

app = Flask(__name__)

from routes.publish import bp as publish_bp  # noqa: E402
from routes.settings import bp as settings_bp  # noqa: E402

app.register_blueprint(publish_bp)
app.register_blueprint(settings_bp)


@app.route("/api/health")
def health():
    return {"ok": True}


def main():
    """Entry point for `orgpress-server` CLI command."""
    parser = argparse.ArgumentParser(description="orgpress server")
    parser.add_argument(
        "--port", type=int, default=PORT, help=f"Port to listen on (default: {PORT})"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    cli_args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if cli_args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("\n  orgpress server v0.1.0")
    print(f"  Port: {cli_args.port}\n")

    app.run(port=cli_args.port, threaded=True)


if __name__ == "__main__":
    main()
