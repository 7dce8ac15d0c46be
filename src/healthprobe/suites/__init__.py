from __future__ import annotations

from healthprobe.suites.base import Link, Suite
from healthprobe.suites.registry import get_suite, list_suites

__all__ = ["Link", "Suite", "get_suite", "list_suites"]
