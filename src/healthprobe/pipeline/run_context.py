from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional

from healthprobe.logger import get_logger

log = get_logger("healthprobe.context")


class RunContext:
    """
    Values discovered by earlier probes that later probes need as input
    (an issued identifier, an authorization token, step markers).

    One context belongs to one orchestrator run. The stage loop is the single
    writer: it merges a probe's state delta after that probe completes and
    before the next one starts. Probes only ever see a read-only snapshot.
    Keys are never removed; setting an existing key overwrites it (a second
    registration replaces `issuedId`).
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._values: dict[str, Any] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def has_all(self, keys: Iterable[str]) -> bool:
        return all(k in self._values for k in keys)

    def missing(self, keys: Iterable[str]) -> tuple[str, ...]:
        return tuple(sorted(k for k in set(keys) if k not in self._values))

    def snapshot(self) -> Mapping[str, Any]:
        return MappingProxyType(dict(self._values))

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def __len__(self) -> int:
        return len(self._values)

    # ------------------------------------------------------------------
    # Writes (stage loop only)
    # ------------------------------------------------------------------

    def set(self, key: str, value: Any) -> None:
        if value is None:
            raise ValueError(f"Refusing to store None for {key!r}; leave it unset")
        if key in self._values and self._values[key] != value:
            log.debug(f"context: overwriting {key}")
        self._values[key] = value

    def merge(self, delta: Mapping[str, Any]) -> None:
        for key, value in delta.items():
            self.set(key, value)

    def __repr__(self) -> str:
        return f"RunContext(keys={sorted(self._values)})"
