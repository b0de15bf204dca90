# Cell classification constants centralized for modular imports
EMPTY = "."
ROOM = "R"
DOOR = "D"
CORRIDOR = "T"

TILE_NAMES = {
    EMPTY: "empty",
    ROOM: "room",
    DOOR: "door",
    CORRIDOR: "corridor",
}

__all__ = ["EMPTY", "ROOM", "DOOR", "CORRIDOR", "TILE_NAMES"]
