"""
project: VoxelForge
module: dungeon_api.py
License: MIT

Dungeon generation API routes.

Every successful generation is recorded as a ``GenerationRun`` (seed plus
normalized config) so it can be listed and replayed later.
"""

import hashlib
import json
import os
import threading

from flask import Blueprint, current_app, jsonify, request

from voxelforge import db
from voxelforge.dungeon import ConfigError, VoxelDungeon, VoxelDungeonConfig
from voxelforge.logging_utils import dungeon_fields, get_logger
from voxelforge.models import GenerationRun

bp_dungeon = Blueprint("dungeon_api", __name__)
log = get_logger("voxelforge.api")

SQLITE_MAX_INT = 9223372036854775807


def _coerce_seed(payload_seed):
    """Convert provided seed (int or str) into a bounded 64-bit signed int; 0 means random."""
    if payload_seed is None or isinstance(payload_seed, bool):
        return 0
    if isinstance(payload_seed, int):
        return payload_seed % SQLITE_MAX_INT
    if isinstance(payload_seed, str):
        s = payload_seed.strip()
        if not s:
            return 0
        if s.isdigit():
            return int(s) % SQLITE_MAX_INT
        h = hashlib.sha256(s.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big") % SQLITE_MAX_INT
    raise ConfigError(f"seed must be an integer or string, got {type(payload_seed).__name__}")


def _config_from_payload(data) -> VoxelDungeonConfig:
    if not isinstance(data, dict):
        raise ConfigError("request body must be a JSON object")
    values = dict(data)
    values["seed"] = _coerce_seed(values.get("seed"))
    config = VoxelDungeonConfig.from_mapping(values).normalized()
    max_cells = int(current_app.config.get("DUNGEON_MAX_CELLS", 1_000_000))
    cells = config.size_x * config.size_y * config.size_z
    if cells > max_cells:
        raise ConfigError(f"grid of {cells} cells exceeds limit of {max_cells}")
    return config


# Small in-process cache keyed by (seed, config). Lock guards the dev server's threads.
_dungeon_cache = {}
_dungeon_cache_lock = threading.Lock()
_DUNGEON_CACHE_MAX = 8  # small LRU-ish manual cap


def _cache_key(config: VoxelDungeonConfig):
    return json.dumps(config.to_dict(), sort_keys=True)


def get_cached_dungeon(config: VoxelDungeonConfig) -> VoxelDungeon:
    # Random-seed requests are never cached.
    if config.seed == 0 or os.environ.get("DUNGEON_DISABLE_CACHE") == "1":
        return VoxelDungeon(config)
    key = _cache_key(config)
    with _dungeon_cache_lock:
        dungeon = _dungeon_cache.get(key)
        if dungeon is not None:
            return dungeon
    dungeon = VoxelDungeon(config)
    with _dungeon_cache_lock:
        if len(_dungeon_cache) >= _DUNGEON_CACHE_MAX:
            _dungeon_cache.pop(next(iter(_dungeon_cache)))
        _dungeon_cache[key] = dungeon
    return dungeon


def clear_dungeon_cache():
    with _dungeon_cache_lock:
        _dungeon_cache.clear()


def _record(dungeon: VoxelDungeon, replay_of=None) -> GenerationRun:
    run = GenerationRun.from_dungeon(dungeon, replay_of=replay_of)
    db.session.add(run)
    db.session.commit()
    log.bind(run_id=run.id, replay_of=replay_of).info(event="dungeon_generated", **dungeon_fields(dungeon))
    return run


def _response(dungeon: VoxelDungeon, run: GenerationRun, include_layers: bool):
    payload = dungeon.to_json(include_layers=include_layers)
    payload["run_id"] = run.id
    return payload


def _include_layers() -> bool:
    return request.args.get("layers", "1").lower() not in ("0", "false", "no")


@bp_dungeon.route("/api/dungeon/generate", methods=["POST"])
def generate_dungeon():
    """Generate a dungeon from a JSON config.

    Body: any ``VoxelDungeonConfig`` field; ``seed`` may be an int or a string
    (hashed deterministically). Omitted fields take their defaults.
    Query: ``layers=0`` drops the per-layer ASCII rows from the response.
    """
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    try:
        config = _config_from_payload(data)
    except (ConfigError, TypeError, ValueError) as exc:
        log.warn(event="generate_rejected", error=str(exc))
        return jsonify({"error": str(exc)}), 400
    dungeon = get_cached_dungeon(config)
    run = _record(dungeon)
    return jsonify(_response(dungeon, run, _include_layers()))


@bp_dungeon.route("/api/dungeon/defaults", methods=["GET"])
def dungeon_defaults():
    return jsonify(VoxelDungeonConfig().to_dict())


@bp_dungeon.route("/api/dungeon/runs", methods=["GET"])
def list_runs():
    try:
        limit = int(request.args.get("limit", 20))
    except ValueError:
        return jsonify({"error": "limit must be an integer"}), 400
    limit = max(1, min(limit, 100))
    runs = GenerationRun.query.order_by(GenerationRun.id.desc()).limit(limit).all()
    return jsonify({"runs": [r.to_dict() for r in runs]})


@bp_dungeon.route("/api/dungeon/runs/<int:run_id>", methods=["GET"])
def get_run(run_id: int):
    run = db.session.get(GenerationRun, run_id)
    if run is None:
        return jsonify({"error": "run not found"}), 404
    return jsonify(run.to_dict())


@bp_dungeon.route("/api/dungeon/runs/<int:run_id>/replay", methods=["POST"])
def replay_run(run_id: int):
    """Regenerate a recorded run from its stored seed and config."""
    original = db.session.get(GenerationRun, run_id)
    if original is None:
        return jsonify({"error": "run not found"}), 404
    try:
        config = VoxelDungeonConfig.from_mapping(dict(original.config, seed=original.seed)).normalized()
    except (ConfigError, TypeError, ValueError) as exc:
        return jsonify({"error": str(exc)}), 400
    dungeon = get_cached_dungeon(config)
    run = _record(dungeon, replay_of=original.id)
    return jsonify(_response(dungeon, run, _include_layers()))
