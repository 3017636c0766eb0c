#!/usr/bin/env python3
"""
Actas Soporte Técnico MoDo — Application Entry Point
Creates Flask app and registers the actas Blueprint.
"""

import logging
from flask import Flask

from actas.core import config
from actas.core.logging_config import setup_logging


def create_app(test_config=None):
    """Application factory."""
    setup_logging()
    report = config.startup_check()

    app = Flask(__name__)
    app.secret_key = config.get_setting("secret_key")
    if test_config:
        app.config.update(test_config)

    # Register the actas blueprint (all routes)
    from actas.api.dashboard import bp
    app.register_blueprint(bp)

    logging.getLogger("actas").info(
        "App ready: %d route(s), %d/%d settings overridden",
        len(list(app.url_map.iter_rules())), report["overridden"], report["total"])
    return app


# For gunicorn: gunicorn app:app
app = create_app()

if __name__ == "__main__":
    port = config.get_int("port")
    app.run(host="0.0.0.0", port=port, debug=False)
