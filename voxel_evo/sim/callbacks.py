# voxel_evo/sim/callbacks.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List, Optional

from .models import Creature, Food

def _noop(*_args) -> None:
    return None

@dataclass
class SimulationCallbacks:
    """
    Hooks for the rendering/physics/UI layers. Every field defaults to a no-op.

    Notifications:  on_generation_change, on_fitness_update, on_food_count_update,
                    on_population_render, on_creature_select, on_chart_update,
                    on_environment_change, on_seasonal_change
    Commands:       on_food_removed, on_rebuild_body, on_body_created,
                    on_body_destroyed, on_adaptation_color
    """
    on_generation_change: Callable[[int], None] = _noop
    on_fitness_update: Callable[[float], None] = _noop
    on_food_count_update: Callable[[int], None] = _noop
    on_population_render: Callable[[], None] = _noop
    on_creature_select: Callable[[Optional[Creature]], None] = _noop
    on_chart_update: Callable[[List[float]], None] = _noop
    on_environment_change: Callable[[str], None] = _noop
    on_seasonal_change: Callable[[str], None] = _noop

    on_food_removed: Callable[[Food], None] = _noop
    on_rebuild_body: Callable[[Creature], None] = _noop
    on_body_created: Callable[[Creature], None] = _noop
    on_body_destroyed: Callable[[Creature], None] = _noop
    on_adaptation_color: Callable[[Creature, str], None] = _noop
