"""
Form Session — the per-kind state machine behind one acta tab.

States:
  editing     initial; no Document yet
  previewing  a submission succeeded; document + visual are set

The form stays editable in both states. A later successful submit replaces
document/visual; a failed one keeps the last good preview and records the
new errors. Export and print are refused (result dict, never an exception)
until a Document exists.
"""

import datetime as dt
import logging
import threading
import time
import uuid
from collections import OrderedDict

from actas.forms.errors import DocumentValidationError, UnknownFieldError
from actas.forms.exporter import ActaExporter
from actas.forms.kinds import (ITEM_FIELDS, MSG_EXPORT_IN_PROGRESS, MSG_NOTHING_TO_EXPORT,
                               get_kind)
from actas.forms.line_items import LineItemStore
from actas.forms.validator import validate_document

log = logging.getLogger("actas.session")

EDITING = "editing"
PREVIEWING = "previewing"

_ITEM_NAMES = tuple(name for name, _, _ in ITEM_FIELDS)


def _refusal(error: str, message: str) -> dict:
    return {"ok": False, "error": error, "message": message}


class FormSession:
    """Editable header + line items for one acta kind, plus its last good render."""

    def __init__(self, kind, exporter=None):
        self.kind = get_kind(kind)
        self.exporter = exporter or ActaExporter()
        self.header = {name: "" for name in self.kind.field_names()}
        self.header["date"] = dt.date.today().isoformat()
        self.items = LineItemStore()
        self.errors = {}
        self.document = None
        self.visual = None
        self._export_lock = threading.Lock()

    @property
    def state(self) -> str:
        return PREVIEWING if self.document is not None else EDITING

    @property
    def exporting(self) -> bool:
        return self._export_lock.locked()

    # ── Editing ──────────────────────────────────────────────────────────────

    def set_field(self, name: str, value):
        if name not in self.header:
            raise UnknownFieldError(name, self.kind.key)
        self.header[name] = value

    def set_item_field(self, item_id: str, name: str, value):
        self.items.update(item_id, name, value)

    def apply_form(self, form) -> int:
        """
        Bulk edit from a posted HTML form.

        Header fields are read by wire name, item fields as
        ``items-<id>-<field>``. Unknown keys and stale item ids are skipped.
        Returns the number of values applied.
        """
        applied = 0
        for name in self.header:
            if name in form:
                self.header[name] = form[name]
                applied += 1
        known = set(self.items.ids())
        for key in form:
            if not key.startswith("items-"):
                continue
            parts = key.split("-", 2)
            if len(parts) != 3:
                continue
            _, item_id, field = parts
            if item_id in known and field in _ITEM_NAMES:
                self.items.update(item_id, field, form[key])
                applied += 1
        return applied

    def add_item(self) -> str:
        item_id = self.items.append()
        log.info("%s: item added (%d total)", self.kind.key, len(self.items),
                 extra={"kind": self.kind.key, "items": len(self.items)})
        return item_id

    def remove_item(self, index: int) -> bool:
        removed = self.items.remove(index)
        if removed:
            log.info("%s: item %d removed (%d left)", self.kind.key, index, len(self.items),
                     extra={"kind": self.kind.key, "items": len(self.items)})
        else:
            log.debug("%s: remove(%d) ignored", self.kind.key, index)
        return removed

    def remove_item_id(self, item_id: str) -> bool:
        return self.remove_item(self.items.index_of(item_id))

    # ── Submit ───────────────────────────────────────────────────────────────

    def submit(self) -> bool:
        """Validate the current edits. True → previewing with a fresh Document."""
        try:
            document = validate_document(self.kind, self.header, self.items.raw())
        except DocumentValidationError as e:
            self.errors = e.errors
            log.info("%s: submit rejected, %d error(s)", self.kind.key, len(e.errors),
                     extra={"kind": self.kind.key, "errors": len(e.errors)})
            return False

        self.errors = {}
        self.visual = self.exporter.render(document)
        self.document = document
        log.info("%s: submit ok, %d item(s)", self.kind.key, len(document.items),
                 extra={"kind": self.kind.key, "items": len(document.items)})
        return True

    # ── Export ───────────────────────────────────────────────────────────────

    def _ready(self) -> bool:
        return self.document is not None and self.visual is not None

    def export_pdf(self) -> dict:
        if not self._ready():
            log.warning("%s: export refused, nothing rendered", self.kind.key,
                        extra={"kind": self.kind.key})
            return _refusal("nothing_to_export", MSG_NOTHING_TO_EXPORT)
        if not self._export_lock.acquire(blocking=False):
            log.warning("%s: export refused, already running", self.kind.key,
                        extra={"kind": self.kind.key})
            return _refusal("export_in_progress", MSG_EXPORT_IN_PROGRESS)
        try:
            log.info("%s: export started (%s)", self.kind.key, self.visual.filename,
                     extra={"kind": self.kind.key, "acta_file": self.visual.filename})
            pdf = self.exporter.export(self.visual, self.kind.page)
        except Exception:
            log.exception("%s: export failed", self.kind.key)
            raise
        finally:
            self._export_lock.release()
        return {"ok": True, "file": pdf}

    def print_view(self) -> dict:
        if not self._ready():
            log.warning("%s: print refused, nothing rendered", self.kind.key,
                        extra={"kind": self.kind.key})
            return _refusal("nothing_to_export", MSG_NOTHING_TO_EXPORT)
        return {"ok": True, "html": self.exporter.print(self.visual)}


class SessionRegistry:
    """
    In-memory FormSessions keyed by (page view id, kind). Lost on restart.

    Bounded: sessions idle longer than ``ttl`` seconds are dropped, and past
    ``max_sessions`` the least recently used one is evicted.
    """

    def __init__(self, exporter_factory=ActaExporter, max_sessions=500, ttl=7200,
                 clock=time.monotonic):
        self._sessions = OrderedDict()      # key → (last_used, FormSession)
        self._lock = threading.Lock()
        self._exporter_factory = exporter_factory
        self.max_sessions = max_sessions
        self.ttl = ttl
        self._clock = clock

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex

    def _expire(self, now):
        while self._sessions:
            key, (last_used, _) = next(iter(self._sessions.items()))
            if now - last_used <= self.ttl:
                break
            del self._sessions[key]
            log.debug("Session %s/%s expired", key[0][:8], key[1])

    def get(self, view_id: str, kind) -> FormSession:
        cfg = get_kind(kind)
        key = (view_id, cfg.key)
        with self._lock:
            now = self._clock()
            self._expire(now)
            entry = self._sessions.pop(key, None)
            session = entry[1] if entry else FormSession(cfg, exporter=self._exporter_factory())
            self._sessions[key] = (now, session)
            while len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                log.info("Session %s/%s evicted (%d max)", evicted[0][:8], evicted[1],
                         self.max_sessions)
            return session

    def __len__(self):
        return len(self._sessions)
