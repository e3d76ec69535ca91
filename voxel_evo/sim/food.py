# voxel_evo/sim/food.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Tuple
import math

from .models import Creature, Food, Vec
from .config import ENERGY
from .rng import RNG

FOOD_TYPES = ("plant", "fruit", "mushroom", "meat", "mineral")
FOOD_WEIGHTS = (0.6, 0.2, 0.1, 0.07, 0.03)

@dataclass(frozen=True)
class FoodProfile:
    energy_mult: float     # times the configured base food energy
    size_mult: float       # times the configured food size
    nutrition: Tuple[Tuple[str, float], ...]
    lifespan: int

PROFILES: Dict[str, FoodProfile] = {
    "plant":    FoodProfile(1.0, 1.0, (("protein", 0.2), ("carbs", 0.7), ("fat", 0.1)), 100),
    "fruit":    FoodProfile(1.6, 1.2, (("protein", 0.1), ("carbs", 0.8), ("fat", 0.1)), 60),
    "mushroom": FoodProfile(0.6, 0.8, (("protein", 0.4), ("carbs", 0.4), ("fat", 0.2)), 150),
    "meat":     FoodProfile(2.0, 1.4, (("protein", 0.7), ("carbs", 0.0), ("fat", 0.3)), 40),
    "mineral":  FoodProfile(0.4, 0.6, (("protein", 0.0), ("carbs", 0.0), ("fat", 0.0), ("minerals", 1.0)), 300),
}

def random_food_type() -> str:
    roll = RNG.random()
    cumulative = 0.0
    for food_type, weight in zip(FOOD_TYPES, FOOD_WEIGHTS):
        cumulative += weight
        if roll < cumulative:
            return food_type
    return "plant"

def food_position(food_type: str, world_size: float) -> Vec:
    """Placement policy per food type, centred on the world origin."""
    x = (RNG.random() - 0.5) * world_size * 0.8
    y = (RNG.random() - 0.5) * world_size * 0.8

    if food_type == "mushroom":
        # mushrooms clump together
        if RNG.random() > 0.7:
            cx = (RNG.random() - 0.5) * world_size * 0.5
            cy = (RNG.random() - 0.5) * world_size * 0.5
            x = cx + (RNG.random() - 0.5) * 3
            y = cy + (RNG.random() - 0.5) * 3
    elif food_type == "meat":
        x = (RNG.random() - 0.5) * world_size * 0.6
        y = (RNG.random() - 0.5) * world_size * 0.6
    elif food_type == "mineral":
        # deposits on a ring
        ang = RNG.random() * math.pi * 2
        dist = (0.5 + RNG.random() * 0.3) * world_size / 2
        x = math.cos(ang) * dist
        y = math.sin(ang) * dist
    return (x, y)

def create_food(food_id: int, world_size: float, food_size: float, food_energy: float) -> Food:
    food_type = random_food_type()
    prof = PROFILES[food_type]
    special = None
    if food_type == "mushroom":
        special = "boost" if RNG.random() > 0.5 else "toxic"
    elif food_type == "mineral":
        special = "evolution_boost"
    x, y = food_position(food_type, world_size)
    return Food(
        id=food_id,
        food_type=food_type,
        energy_content=food_energy * prof.energy_mult,
        size=food_size * prof.size_mult,
        nutritional_value=dict(prof.nutrition),
        lifespan=prof.lifespan,
        x=x, y=y,
        special_effect=special,
    )

def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))

def energy_for(food: Food, diet_type: str) -> int:
    energy = food.energy_content
    ft = food.food_type

    if diet_type == "herbivore":
        if ft in ("plant", "fruit"):
            energy *= 1.5
        elif ft == "meat":
            energy *= 0.2
    elif diet_type == "carnivore":
        if ft == "meat":
            energy *= 1.8
        elif ft in ("plant", "fruit"):
            energy *= 0.3
    elif diet_type == "omnivore":
        if ft == "mushroom":
            energy *= 1.2

    if ft == "mushroom" and food.special_effect == "boost":
        energy *= 1.5
    elif ft == "mushroom" and food.special_effect == "toxic":
        energy *= 0.5
    return _round_half_up(energy)

def diet_preference(diet_type: str, food_type: str) -> float:
    if diet_type == "herbivore":
        if food_type == "plant":
            return 1.5
        if food_type == "fruit":
            return 1.3
        return 0.5
    if diet_type == "carnivore":
        return 1.5 if food_type == "meat" else 0.6
    return 1.0

def apply_effects_to(food: Food, creature: Creature) -> None:
    if food.special_effect == "boost":
        creature.energy = min(ENERGY.max_energy, creature.energy + 20)
    elif food.special_effect == "toxic":
        creature.energy = max(ENERGY.effect_floor, creature.energy - 10)
    elif food.special_effect == "evolution_boost":
        creature.evolution_boost = True
