from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from healthprobe.env import Environment
from healthprobe.stages import Stage


@dataclass(frozen=True)
class Link:
    label: str
    path: str  # may contain {issuedId}


@dataclass(frozen=True)
class Suite:
    """
    A named, ordered list of stages plus the links shown after the report.

    `seed_keys` are Run Context keys the caller must supply up front.
    """

    name: str
    title: str
    build: Callable[[Environment], list[Stage]]
    links: tuple[Link, ...] = ()
    seed_keys: tuple[str, ...] = field(default_factory=tuple)

    def stages(self, env: Environment) -> list[Stage]:
        return self.build(env)
