# voxel_evo/sim/fitness.py
from __future__ import annotations

from .models import Creature
from .genes import Genome
from .config import REPRO


def _environmental_term(g: Genome, environment_type: str) -> float:
    if environment_type == "plains":
        return (g.speed * 0.2
                + g.health * 0.1
                + (0.1 if g.environmental_preference == "land" else 0.0))

    if environment_type == "ocean":
        return (g.speed * 0.2
                + g.water_adaptation * 0.3
                - g.size * 0.1
                + (0.2 if g.limb_type == "swimming" else 0.0)
                + (0.15 if g.environmental_preference == "water" else 0.0))

    if environment_type == "mountains":
        return (g.strength * 0.25
                + g.terrain_adaptation * 0.2
                + (0.2 if g.limb_type == "climbing" else 0.0)
                + (0.1 if g.body_shape == "slender" else 0.0))

    if environment_type == "desert":
        # low metabolism pays off
        return (g.health * 0.2
                + g.temperature_resistance * 0.3
                - g.metabolism * 0.2
                + (0.1 if g.water_adaptation < 0.3 else 0.0))

    if environment_type == "forest":
        color_fit = 1 - abs(g.color - 120) / 360  # green hues blend in
        return (color_fit * 0.2
                + g.size * 0.1
                + g.camouflage * 0.2
                + (0.15 if g.limb_type == "climbing" else 0.0))

    if environment_type == "predators":
        return ((g.behavior + 1) * 0.15
                + g.speed * 0.15
                + g.camouflage * 0.2
                + (g.shell_thickness * 0.15 if g.has_shell else 0.0)
                + (g.spike_length * 0.15 if g.has_spikes else 0.0))

    return 0.0


def special_trait_bonus(g: Genome, environment_type: str, parent_distance) -> float:
    bonus = g.adaptability * 0.05

    if environment_type == "ocean":
        if g.limb_type == "swimming" and g.water_adaptation > 0.7:
            bonus += 0.1
    elif environment_type == "mountains":
        if g.limb_type == "climbing" and g.terrain_adaptation > 0.7:
            bonus += 0.1
    elif environment_type == "desert":
        if g.temperature_resistance > 0.8 and g.metabolism < 0.3:
            bonus += 0.15
    elif environment_type == "predators":
        if (g.has_shell and g.shell_thickness > 0.7) or (g.has_spikes and g.spike_length > 0.7):
            bonus += 0.1

    # hybrid vigor from distant parents
    if parent_distance is not None and parent_distance > REPRO.hybrid_distance:
        bonus += g.hybrid_vigor * 0.1
    return bonus


def evaluate(creature: Creature, environment_type: str = "plains") -> float:
    """
    Score a creature in [0, 1] for the given environment and store it on the creature.

      survival  = min(age, 100) / 100 * 0.2
      energy    = energy / 100 * 0.3
      food      = min(1, eaten / 20)       (weighted 0.5)
      + per-environment gene alignment + special trait bonus
    """
    creature.current_environment_type = environment_type

    survival = min(creature.age, 100) / 100 * 0.2
    energy = creature.energy / 100 * 0.3
    food = min(1.0, creature.eaten / 20)

    env = _environmental_term(creature.genes, environment_type)
    bonus = special_trait_bonus(creature.genes, environment_type, creature.parent_genetic_distance)

    total = survival + energy + food * 0.5 + env + bonus
    creature.fitness = max(0.0, min(1.0, total))
    return creature.fitness
