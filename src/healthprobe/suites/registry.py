from __future__ import annotations

from typing import Dict

from healthprobe.suites import features, flow, health, verify
from healthprobe.suites.base import Suite


_SUITES: Dict[str, Suite] = {
    s.name: s for s in (health.SUITE, features.SUITE, flow.SUITE, verify.SUITE)
}


def get_suite(name: str) -> Suite:
    key = (name or "").strip().lower()
    if key not in _SUITES:
        raise ValueError(f"Unknown suite: {name}")
    return _SUITES[key]


def list_suites() -> list[Suite]:
    return list(_SUITES.values())
