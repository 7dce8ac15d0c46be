from __future__ import annotations

import sys

from rich.console import Console

# Console for direct CLI output (tables, dumps). Logging has its own.
RENDER = Console(file=sys.stdout, soft_wrap=True)
