import logging
import os
import re
import time

logger = logging.getLogger(__name__)

# ────────────────────────────────
# Time Helpers
# ────────────────────────────────


def now() -> float:
    return time.perf_counter()


def elapsed_ms(start: float) -> float:
    return (now() - start) * 1000.0


_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)\s*(ms|us|ns|s|m|h)", re.IGNORECASE)
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(text: str) -> float:
    """Parse ``5s``, ``250ms``, ``1m30s`` or bare seconds into seconds."""
    raw = text.strip()
    if not raw:
        raise ValueError("empty duration")
    try:
        seconds = float(raw)
    except ValueError:
        pos = 0
        seconds = 0.0
        for match in _DURATION_PART.finditer(raw):
            if raw[pos:match.start()].strip():
                raise ValueError(f"invalid duration: {text!r}") from None
            seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2).lower()]
            pos = match.end()
        if pos == 0 or raw[pos:].strip():
            raise ValueError(f"invalid duration: {text!r}") from None
    if seconds <= 0:
        raise ValueError(f"duration must be positive: {text!r}")
    return seconds


# ────────────────────────────────
# Worker Sizing
# ────────────────────────────────


def default_tasks() -> int:
    tasks = (os.cpu_count() or 1) * 4
    logger.debug(f"Defaulting to {tasks} tasks")
    return tasks


# ────────────────────────────────
# Body Preview
# ────────────────────────────────


def decode_body(buf: bytes | bytearray, encoding: str = "utf-8") -> str:
    try:
        return bytes(buf).decode(encoding, errors="replace")
    except LookupError:
        logger.debug(f"Unknown charset {encoding!r}, decoding as utf-8")
        return bytes(buf).decode("utf-8", errors="replace")


def truncate(text: str, limit: int = 200) -> str:
    if limit <= 0 or len(text) <= limit:
        return text
    return text[:limit] + "…"
