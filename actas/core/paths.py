"""
actas/core/paths.py — Centralized Path Configuration

Every module imports its directories from here instead of computing its own.
Nothing is written to disk: generated PDFs are streamed back to the browser.
"""

import os
import logging

from actas.core.config import get_setting

log = logging.getLogger("actas.paths")

# ── Project Root ──────────────────────────────────────────────────────────────
_THIS_FILE = os.path.abspath(__file__)
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(_THIS_FILE)))


def _resolve_assets_dir() -> str:
    """ACTAS_ASSETS_DIR env override, else the repo's assets/ folder."""
    env_dir = os.environ.get("ACTAS_ASSETS_DIR", "")
    if env_dir and os.path.isdir(env_dir):
        return env_dir
    return os.path.join(PROJECT_ROOT, "assets")


ASSETS_DIR = _resolve_assets_dir()
LOGO_NAMES = ("logo.png", "logo.jpg", "logo.jpeg")


def find_logo():
    """Logo for the acta header: ACTAS_LOGO_PATH first, then assets/logo.*; None if absent."""
    configured = get_setting("logo_path")
    if configured:
        if os.path.isfile(configured):
            return configured
        log.warning("ACTAS_LOGO_PATH not found: %s", configured)
    for name in LOGO_NAMES:
        p = os.path.join(ASSETS_DIR, name)
        if os.path.isfile(p):
            return p
    return None
