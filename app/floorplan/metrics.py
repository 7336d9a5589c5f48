from typing import Dict


def init_metrics() -> Dict[str, object]:
    return {
        'attempts': 0,
        'attempt_limit': 0,
        'scales_tried': 0,
        'winning_attempt': -1,
        'winning_scale': 0.0,
        'hallways': 0,
        'door_candidates': 0,
        'rooms': 0,
        'cells_grown': 0,
        'walls': 0,
        'windows': 0,
        'exterior_exits': 0,
        'phase_ms': {},
        'runtime_ms': 0.0,
    }
