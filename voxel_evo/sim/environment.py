# voxel_evo/sim/environment.py
from __future__ import annotations
import math

from .models import EnvironmentSettings

# seasonal ring; "predators" is only ever chosen by hand
ENVIRONMENT_CYCLE = ("plains", "forest", "ocean", "mountains", "desert")
SEASONAL_EFFECTS = ("drought", "abundance", "cold", "optimal", "predation")

FOOD_SPAWN_RATES = {
    "plains": 0.08,
    "forest": 0.07,
    "desert": 0.03,
    "predators": 0.04,
}
DEFAULT_SPAWN_RATE = 0.05


def selection_pressure(environment_type: str, competition_intensity: float) -> float:
    """Fraction of the roster kept as elites, always within [0.1, 0.5]."""
    if environment_type in ("desert", "predators"):
        pressure = 0.2
    elif environment_type in ("plains", "forest"):
        pressure = 0.4
    else:
        pressure = 0.3
    pressure *= (2 - competition_intensity)
    return max(0.1, min(0.5, pressure))

def is_extreme(environment_type: str, settings: EnvironmentSettings) -> bool:
    return (environment_type in ("desert", "predators")
            or settings.temperature == "extreme"
            or settings.predator_pressure == "high")

def adjusted_mutation_rate(
    rate: float,
    environment_type: str,
    settings: EnvironmentSettings,
    generation: int,
    evolution_boost: bool,
) -> float:
    if is_extreme(environment_type, settings):
        rate *= 1.5
    rate *= settings.mutation_stimulus
    if generation < 5:
        rate *= 1.2
    if evolution_boost:
        rate *= 1.3
    return rate

def food_spawn_rate(environment_type: str, seasonal: bool, cycle_time: float, cycle_period: float) -> float:
    rate = FOOD_SPAWN_RATES.get(environment_type, DEFAULT_SPAWN_RATE)
    if seasonal:
        # 0.5x .. 1.5x over one cycle
        rate *= 1 + 0.5 * math.sin(cycle_time / cycle_period * math.pi * 2)
    return rate

def next_environment(environment_type: str) -> str:
    try:
        idx = ENVIRONMENT_CYCLE.index(environment_type)
    except ValueError:
        idx = -1
    return ENVIRONMENT_CYCLE[(idx + 1) % len(ENVIRONMENT_CYCLE)]

def apply_seasonal_effect(settings: EnvironmentSettings, effect: str) -> None:
    if effect == "drought":
        settings.food_distribution = "sparse"
    elif effect == "abundance":
        settings.food_distribution = "abundant"
    elif effect == "cold":
        settings.temperature = "cold"
    elif effect == "optimal":
        settings.temperature = "moderate"
    elif effect == "predation":
        settings.predator_pressure = "high"

def max_food_count(max_food: int, food_amount: float) -> int:
    return int(math.floor(max_food * food_amount / 10))
