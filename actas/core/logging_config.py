"""
Structured logging configuration for the actas app.
Import and call setup_logging() once at app startup.
"""
import logging
import json
from datetime import datetime, timezone

from actas.core.config import get_setting, get_flag

# Extra fields merged into JSON log lines when present on the record
EXTRA_KEYS = ("route", "method", "status", "kind", "acta_file", "items",
              "errors", "duration_ms")


class JSONFormatter(logging.Formatter):
    """Structured JSON log lines for machine parsing."""
    def format(self, record):
        entry = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "module": record.module,
            "func": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        for key in EXTRA_KEYS:
            if hasattr(record, key):
                entry[key] = getattr(record, key)
        return json.dumps(entry, default=str, ensure_ascii=False)


class HumanFormatter(logging.Formatter):
    """Readable console format with color."""
    COLORS = {
        "DEBUG": "\033[36m", "INFO": "\033[32m",
        "WARNING": "\033[33m", "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record):
        color = self.COLORS.get(record.levelname, "")
        ts = datetime.now().strftime("%H:%M:%S")
        line = f"{color}{ts} [{record.levelname[0]}] {record.name}: {record.getMessage()}{self.RESET}"
        if record.exc_info and record.exc_info[0]:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(level=None, json_logs=None):
    """
    Configure logging for the full application.

    Args:
        level: Override log level (default: from LOG_LEVEL env or INFO)
        json_logs: Force JSON format (default: ACTAS_JSON_LOGS env)
    """
    if level is None:
        level = get_setting("log_level").upper()
    if json_logs is None:
        json_logs = get_flag("json_logs")

    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(JSONFormatter() if json_logs else HumanFormatter())
    root.addHandler(console)

    # Quiet noisy libs
    for name in ("werkzeug", "PIL", "reportlab"):
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("actas").info("Logging initialized (level=%s, json=%s)",
                                    level, bool(json_logs))
