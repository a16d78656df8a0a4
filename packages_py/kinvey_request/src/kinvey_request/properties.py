"""
Custom request properties sent in the X-Kinvey-Custom-Request-Properties header.
"""
from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional

from .errors import ValidationError


class RequestProperties(Mapping):
    """Caller-supplied request metadata.

    Behaves as a read-only mapping; mutate through set/remove/add_properties.
    Falsy values passed to set() or add_properties() delete the key.
    """

    def __init__(self, properties: Optional[Mapping[str, Any]] = None) -> None:
        if properties is None:
            properties = {}
        if not isinstance(properties, Mapping):
            raise ValidationError("properties argument must be an object")
        self._properties: Dict[str, Any] = dict(properties)

    def get(self, key: str, default: Any = None) -> Any:
        if key and key in self._properties:
            return self._properties[key]
        return default

    def set(self, key: str, value: Any) -> "RequestProperties":
        self.add_properties({key: value})
        return self

    def remove(self, key: str) -> None:
        if key:
            self._properties.pop(key, None)

    def has(self, key: str) -> bool:
        return bool(self.get(key))

    def add_properties(self, properties: Mapping[str, Any]) -> None:
        if not isinstance(properties, Mapping):
            raise ValidationError("properties argument must be an object")

        for key, value in properties.items():
            if value:
                self._properties[key] = value
            else:
                self._properties.pop(key, None)

    def clear(self) -> None:
        self._properties = {}

    def to_json(self) -> Dict[str, Any]:
        return dict(self._properties)

    def __getitem__(self, key: str) -> Any:
        return self._properties[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def __repr__(self) -> str:
        return f"RequestProperties({self._properties!r})"
