from __future__ import annotations

import shutil
from typing import Iterable, Optional

# --------------------------------------------------
# Layout
# --------------------------------------------------

DEFAULT_WIDTH = 72
MIN_WIDTH = 40
LOG_GUTTER_WIDTH = 10  # "INFO     " column rendered by RichHandler

RULE = "─"
HEAVY_RULE = "━"


def _width(width: Optional[int]) -> int:
    if width is not None:
        return max(MIN_WIDTH, width)
    cols = shutil.get_terminal_size((DEFAULT_WIDTH + LOG_GUTTER_WIDTH, 24)).columns
    return max(MIN_WIDTH, min(DEFAULT_WIDTH, cols - LOG_GUTTER_WIDTH))


# --------------------------------------------------
# Banner
# --------------------------------------------------

HEALTHPROBE_BANNER = r"""

 _               _ _   _
| |__   ___  __ _| | |_| |__  _ __  _ __ ___ | |__   ___
| '_ \ / _ \/ _` | | __| '_ \| '_ \| '__/ _ \| '_ \ / _ \
| | | |  __/ (_| | | |_| | | | |_) | | | (_) | |_) |  __/
|_| |_|\___|\__,_|_|\__|_| |_| .__/|_|  \___/|_.__/ \___|
                             |_|
"""


# --------------------------------------------------
# Stage headers / run sections
# --------------------------------------------------


def HEALTHPROBE_HEADER(title: str, *, width: Optional[int] = None) -> str:
    """A heavy rule with the title centred in it, e.g. for `Stage 2/5: Core`."""
    label = f" {title.strip()} "
    w = max(_width(width), len(label) + 8)
    left = (w - len(label)) // 2
    right = w - left - len(label)
    return f"\n{HEAVY_RULE * left}{label}{HEAVY_RULE * right}\n"


def HEALTHPROBE_SECTION_END(*, width: Optional[int] = None) -> str:
    return f"{RULE * _width(width)}\n"


# --------------------------------------------------
# Key/value box (run summary)
# --------------------------------------------------


def HEALTHPROBE_BOX(
    rows: Iterable[tuple[str, object]],
    *,
    title: Optional[str] = None,
    width: Optional[int] = None,
) -> str:
    pairs = [(str(k), str(v)) for k, v in rows]
    key_w = max((len(k) for k, _ in pairs), default=0)
    body = [f"{k.ljust(key_w)}  {v}" for k, v in pairs]

    inner = max([_width(width) - 4, len(title or ""), *(len(line) for line in body)])
    edge = RULE * (inner + 2)

    out = [f"┌{edge}┐"]
    if title:
        out.append(f"│ {title.center(inner)} │")
        out.append(f"├{edge}┤")
    out.extend(f"│ {line.ljust(inner)} │" for line in body)
    out.append(f"└{edge}┘")
    return "\n".join(out)


# --------------------------------------------------
# Symbols
# --------------------------------------------------


class SYMBOLS:
    # Outcomes
    PASS = "✔"
    FAIL = "✖"
    SKIP = "⤼"

    # Report
    SCORE = "📈"
    LINK = "🔗"
    NEXT = "💡"
