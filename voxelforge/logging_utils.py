"""Minimal structured logging helper.

Provides a lightweight wrapper around print() to emit key=value pairs with a
timestamp and level, or one JSON object per line when ``VOXELFORGE_LOG_JSON``
is set.

Usage:
    from voxelforge.logging_utils import log
    log.info(event="startup", port=5000)

    # Attach run context once, then log several events under it
    run_log = log.bind(run_id=run.id, seed=dungeon.seed)
    run_log.info(event="dungeon_generated", **dungeon_fields(dungeon))

Values that are not numbers are str()'d with spaces replaced; tuples and lists
render as comma-joined items. Reserved keys: level, ts.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = LEVELS.get(os.getenv("VOXELFORGE_LOG_LEVEL", "info"), 20)
JSON_MODE = os.getenv("VOXELFORGE_LOG_JSON", "0") in ("1", "true", "TRUE", "yes", "on")


def _format(level: str, **fields):
    if JSON_MODE:
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = int(time.time())
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={int(time.time())}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, (int, float)):
            parts.append(f"{k}={v}")
        elif isinstance(v, (tuple, list)):
            parts.append(f"{k}={','.join(str(i) for i in v)}")
        else:
            s = str(v).replace(" ", "_")
            parts.append(f"{k}={s}")
    return " ".join(parts)


class _Logger:
    def __init__(self, name: str | None = None, context: dict | None = None):
        self.name = name or "voxelforge"
        self.context = dict(context or {})

    def bind(self, **context) -> "_Logger":
        """Return a logger that adds ``context`` to every event; call-site fields win."""
        return _Logger(self.name, {**self.context, **context})

    def _log(self, lvl: str, **fields):
        if LEVELS[lvl] < CURRENT_LEVEL:
            return
        fields = {**self.context, **fields}
        fields.setdefault("logger", self.name)
        print(_format(lvl, **fields), file=sys.stdout if lvl != "error" else sys.stderr)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


def dungeon_fields(dungeon) -> dict:
    """Summary fields for a generated dungeon, shared by every generation event."""
    cfg = dungeon.config
    return {
        "seed": dungeon.seed,
        "size": dungeon.size,
        "mode": cfg.corridor_mode,
        "rooms": len(dungeon.rooms),
        "rooms_target": cfg.room_count,
        "carved": len(dungeon.carved_edges),
        "skipped": len(dungeon.skipped_edges),
        "start": dungeon.start_room,
        "end": dungeon.end_room,
    }


_LOGGER_CACHE = {}


def get_logger(name: str):
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]


log = get_logger("voxelforge")
