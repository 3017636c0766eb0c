"""
config.py — Environment settings registry for the actas app

Single source of truth for every environment variable the app reads.

Env vars:
  SECRET_KEY          — Flask session signing key
  ACTAS_INSTITUTION   — Institution name printed in every acta header
  ACTAS_LOGO_PATH     — Logo image drawn next to the title (PNG/JPG)
  LOG_LEVEL           — Root log level (DEBUG, INFO, ...)
  ACTAS_JSON_LOGS     — "true" for JSON log lines instead of colored console
  PORT                — Dev server port
  ACTAS_MAX_SESSIONS  — In-memory form sessions cap (LRU eviction)
  ACTAS_SESSION_TTL   — Idle seconds before a form session is dropped

Values are read on every call so tests can monkeypatch the environment.
"""

import os
import logging

log = logging.getLogger("actas.config")

DEFAULT_INSTITUTION = "CORPORACIÓN MODO CARACAS, C.A"

_REGISTRY = {
    "secret_key": {
        "env": "SECRET_KEY",
        "desc": "Flask session signing key",
        "default": "actas-soporte-modo",
        "sensitive": True,
    },
    "institution": {
        "env": "ACTAS_INSTITUTION",
        "desc": "Institution name in the acta header",
        "default": DEFAULT_INSTITUTION,
    },
    "logo_path": {
        "env": "ACTAS_LOGO_PATH",
        "desc": "Logo image for the acta header",
        "default": "",
    },
    "log_level": {
        "env": "LOG_LEVEL",
        "desc": "Root log level",
        "default": "INFO",
    },
    "json_logs": {
        "env": "ACTAS_JSON_LOGS",
        "desc": "Emit JSON log lines",
        "default": "",
    },
    "port": {
        "env": "PORT",
        "desc": "Dev server port",
        "default": "5000",
    },
    "max_sessions": {
        "env": "ACTAS_MAX_SESSIONS",
        "desc": "Form sessions kept in memory before the least recently used is evicted",
        "default": "500",
    },
    "session_ttl": {
        "env": "ACTAS_SESSION_TTL",
        "desc": "Seconds an idle form session is kept",
        "default": "7200",
    },
}


def get_setting(name: str) -> str:
    """Get a setting by registry name. Unknown names return empty string."""
    entry = _REGISTRY.get(name)
    if not entry:
        log.warning("Unknown setting requested: %s", name)
        return ""
    return os.environ.get(entry["env"], "") or entry.get("default", "")


def get_flag(name: str) -> bool:
    return get_setting(name).strip().lower() in ("1", "true", "yes", "on")


def get_int(name: str) -> int:
    """Integer setting; a malformed override falls back to the default."""
    raw = get_setting(name)
    try:
        return int(raw)
    except ValueError:
        log.warning("Setting %s=%r is not an integer, using default", name, raw)
        return int(_REGISTRY[name]["default"])


def mask(value: str) -> str:
    """Mask a sensitive value for safe logging."""
    if not value:
        return "(not set)"
    if len(value) <= 12:
        return value[:4] + "****"
    return value[:8] + "****" + f"({len(value)} chars)"


def settings_report() -> dict:
    """Which settings are overridden from the environment, values masked where sensitive."""
    results = {}
    for name, entry in _REGISTRY.items():
        val = get_setting(name)
        results[name] = {
            "env": entry["env"],
            "desc": entry["desc"],
            "overridden": bool(os.environ.get(entry["env"])),
            "value": mask(val) if entry.get("sensitive") else val,
        }
    return {
        "settings": results,
        "total": len(results),
        "overridden": sum(1 for r in results.values() if r["overridden"]),
    }


def startup_check():
    """Log the effective configuration once at boot."""
    report = settings_report()
    log.info("Settings: %d/%d overridden from environment",
             report["overridden"], report["total"])
    if not report["settings"]["secret_key"]["overridden"]:
        log.warning("SECRET_KEY not set, using the built-in development key")
    return report
