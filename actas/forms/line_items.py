"""
The editable equipment list behind one form session.

Entries are raw user text (validation happens on submit). Each entry has a
stable id so removing one row never shifts the edits of another. The store
never becomes empty.
"""

import uuid

from actas.forms.errors import UnknownFieldError, UnknownItemError

ITEM_KEYS = ("serialNumber", "description", "quantity")


def default_item() -> dict:
    return {"serialNumber": "", "description": "", "quantity": 1}


class LineItemStore:
    """Ordered, mutable sequence of equipment entries with a floor of one."""

    def __init__(self, items=None):
        self._entries = []
        for item in items or [default_item()]:
            self.append(item)

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter([dict(e) for e in self._entries])

    def append(self, item=None) -> str:
        """Add an entry at the end (placeholder values by default). Returns its id."""
        entry = default_item()
        if item:
            entry.update({k: item[k] for k in ITEM_KEYS if k in item})
        entry["id"] = uuid.uuid4().hex[:8]
        self._entries.append(entry)
        return entry["id"]

    def remove(self, index: int) -> bool:
        """Delete the entry at ``index``. No-op (False) for the last entry or a bad index."""
        if len(self._entries) <= 1:
            return False
        if not 0 <= index < len(self._entries):
            return False
        del self._entries[index]
        return True

    def index_of(self, item_id: str) -> int:
        for i, e in enumerate(self._entries):
            if e["id"] == item_id:
                return i
        raise UnknownItemError(item_id)

    def ids(self) -> list:
        return [e["id"] for e in self._entries]

    def update(self, item_id: str, field: str, value):
        if field not in ITEM_KEYS:
            raise UnknownFieldError(field, "line item")
        self._entries[self.index_of(item_id)][field] = value

    def raw(self) -> list:
        """Entries as plain dicts without ids, in insertion order."""
        return [{k: e[k] for k in ITEM_KEYS} for e in self._entries]
