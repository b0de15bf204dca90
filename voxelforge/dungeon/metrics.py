from typing import Dict


def init_metrics() -> Dict[str, int | float | bool]:
    return {
        'rooms_target': 0,
        'rooms_placed': 0,
        'placement_attempts': 0,
        'doors_fallback_center': 0,
        'edges_candidate': 0,
        'edges_spanning': 0,
        'edges_extra': 0,
        'edges_carved': 0,
        'edges_skipped': 0,
        'components': 0,
        'corridor_cells': 0,
        'path_expansions': 0,
        'runtime_ms': 0.0,
    }
