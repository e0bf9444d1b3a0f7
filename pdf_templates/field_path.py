from collections.abc import Mapping, Sequence


class Resolution:
    """Result of a field lookup: ``found`` is False for a path that doesn't resolve."""

    __slots__ = ("found", "value")

    def __init__(self, found, value=None):
        self.found = found
        self.value = value

    def __repr__(self):
        return f"Found({self.value!r})" if self.found else "NOT_FOUND"

    def __eq__(self, other):
        return isinstance(other, Resolution) and (self.found, self.value) == (other.found, other.value)


NOT_FOUND = Resolution(False)


class Found(Resolution):
    def __init__(self, value):
        super().__init__(True, value)


class FieldPath:
    """Dot separated path into nested dicts / lists, e.g. ``client.name`` or ``items.0.total``."""

    def __init__(self, path):
        self.path = path.strip()
        self.parts = self.path.split(".") if self.path else []

    def __repr__(self):
        return f"FieldPath({self.path!r})"

    def resolve(self, data):
        if not self.parts or any(part == "" for part in self.parts):
            return NOT_FOUND

        current = data
        for part in self.parts:
            if isinstance(current, Mapping):
                if part not in current:
                    return NOT_FOUND
                current = current[part]
            elif isinstance(current, Sequence) and not isinstance(current, str) and part.isdigit():
                index = int(part)
                if index >= len(current):
                    return NOT_FOUND
                current = current[index]
            else:
                return NOT_FOUND

        if current is None:
            return NOT_FOUND
        return Found(current)
