"""Exceptions raised by the acta form engine."""


class ActaError(Exception):
    """Base class for every acta engine error."""


class UnknownKindError(ActaError, KeyError):
    def __init__(self, kind):
        super().__init__(kind)
        self.kind = kind

    def __str__(self):
        return f"Unknown acta kind: {self.kind!r}"


class UnknownFieldError(ActaError, KeyError):
    def __init__(self, field, kind=""):
        super().__init__(field)
        self.field = field
        self.kind = kind

    def __str__(self):
        return f"Field {self.field!r} is not part of the {self.kind or 'acta'} form"


class UnknownItemError(ActaError, KeyError):
    def __init__(self, item_id):
        super().__init__(item_id)
        self.item_id = item_id

    def __str__(self):
        return f"No line item with id {self.item_id!r}"


class DocumentValidationError(ActaError, ValueError):
    """Validation failed; ``errors`` maps wire paths (``items[2].quantity``) to messages."""

    def __init__(self, errors: dict):
        self.errors = dict(errors)
        super().__init__(f"{len(self.errors)} field(s) failed validation")
