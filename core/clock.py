"""Clock helpers shared by the fusion engine."""

from __future__ import annotations

import time


def millis() -> int:
    """Return current monotonic time in milliseconds."""

    return int(time.monotonic() * 1000)
