from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional


class ProbeStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


def _frozen(delta: Optional[Mapping[str, Any]] = None) -> Mapping[str, Any]:
    return MappingProxyType(dict(delta or {}))


@dataclass(frozen=True)
class ProbeOutcome:
    status: ProbeStatus
    message: str = ""
    state_delta: Mapping[str, Any] = field(default_factory=_frozen)
    transport_used: Optional[str] = None
    raw: Optional[str] = None
    missing: tuple[str, ...] = ()

    @property
    def passed(self) -> bool:
        return self.status is ProbeStatus.PASSED

    @property
    def skipped(self) -> bool:
        return self.status is ProbeStatus.SKIPPED

    @property
    def failed(self) -> bool:
        return self.status is ProbeStatus.FAILED

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def ok(
        cls,
        message: str = "",
        state_delta: Optional[Mapping[str, Any]] = None,
        transport_used: Optional[str] = None,
    ) -> "ProbeOutcome":
        return cls(
            status=ProbeStatus.PASSED,
            message=message,
            state_delta=_frozen(state_delta),
            transport_used=transport_used,
        )

    @classmethod
    def fail(
        cls,
        message: str,
        raw: Optional[str] = None,
        transport_used: Optional[str] = None,
    ) -> "ProbeOutcome":
        return cls(
            status=ProbeStatus.FAILED,
            message=message,
            transport_used=transport_used,
            raw=raw,
        )

    @classmethod
    def skip(cls, missing: tuple[str, ...]) -> "ProbeOutcome":
        return cls(
            status=ProbeStatus.SKIPPED,
            message=f"missing {', '.join(missing)}",
            missing=tuple(missing),
        )

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"status": self.status.value, "message": self.message}
        if self.transport_used:
            data["transport"] = self.transport_used
        if self.missing:
            data["missing"] = list(self.missing)
        if self.raw is not None:
            data["raw"] = self.raw
        return data
