"""
Case-insensitive header map.
"""
import json
from typing import Any, Dict, Iterator, Mapping, Optional

from .errors import ValidationError


def to_json_text(value: Any) -> str:
    """Serialize a value to compact JSON text."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


class HeaderMap:
    """Mapping from header name to string value.

    Names are matched case-insensitively and at most one entry is stored per
    case-insensitive name. Non-string values are stored as JSON text.
    """

    def __init__(self, headers: Optional[Mapping[str, Any]] = None) -> None:
        self._headers: Dict[str, str] = {}
        if headers is not None:
            self.add_all(headers)

    def _find_key(self, name: Any) -> Optional[str]:
        if not name:
            return None
        lowered = str(name).lower()
        for key in self._headers:
            if key.lower() == lowered:
                return key
        return None

    def get(self, name: Any) -> Optional[str]:
        key = self._find_key(name)
        if key is None:
            return None
        return self._headers[key]

    def set(self, name: Any, value: Any) -> None:
        """Set a header, replacing any entry with the same name in any case."""
        if not name or not value:
            raise ValidationError("A name and value must be provided to set a header.")

        name = str(name)
        existing = self._find_key(name)
        if existing is not None:
            del self._headers[existing]

        self._headers[name] = value if isinstance(value, str) else to_json_text(value)

    def add(self, header: Mapping[str, Any]) -> None:
        """Set a single header from a {"name": ..., "value": ...} record."""
        self.set(header.get("name"), header.get("value"))

    def has(self, name: Any) -> bool:
        return bool(self.get(name))

    def remove(self, name: Any) -> None:
        key = self._find_key(name)
        if key is not None:
            del self._headers[key]

    def add_all(self, headers: Mapping[str, Any]) -> None:
        if not isinstance(headers, Mapping):
            raise ValidationError("Headers argument must be an object.")
        for name, value in headers.items():
            self.set(name, value)

    def clear(self) -> None:
        self._headers = {}

    def copy(self) -> "HeaderMap":
        duplicate = HeaderMap()
        duplicate._headers = dict(self._headers)
        return duplicate

    def to_json(self) -> Dict[str, str]:
        return dict(self._headers)

    def __contains__(self, name: object) -> bool:
        return self.has(name)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._headers))

    def __len__(self) -> int:
        return len(self._headers)

    def __repr__(self) -> str:
        return f"HeaderMap({self._headers!r})"
