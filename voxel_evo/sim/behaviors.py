# voxel_evo/sim/behaviors.py
from __future__ import annotations
from typing import Callable, List, Optional, Tuple
import math

from .models import Creature, Food, EnvironmentSettings
from .food import diet_preference, energy_for, apply_effects_to
from .config import BEHAV, ENERGY, SEASON
from .world import World
from .rng import RNG

Vec = Tuple[float, float]
ColorHook = Optional[Callable[[Creature, str], None]]

# gene nudged toward the environment by adaptable creatures
ADAPTIVE_GENES = {
    "ocean": "water_adaptation",
    "desert": "temperature_resistance",
    "mountains": "terrain_adaptation",
    "predators": "camouflage",
}

# cosmetic hue band per environment
CAMOUFLAGE_HUES = {
    "desert": (30.0, 60.0),
    "forest": (90.0, 150.0),
    "ocean": (180.0, 240.0),
}

# ---------------- vector helpers ----------------
def _unit(v: Vec) -> Vec:
    x, y = v
    n = math.hypot(x, y)
    return (0.0, 0.0) if n == 0 else (x/n, y/n)

def _clamp_speed(vx: float, vy: float, vmax: float) -> Vec:
    spd = math.hypot(vx, vy)
    if spd <= vmax or spd <= 1e-12:
        return (vx, vy)
    f = vmax / spd
    return (vx * f, vy * f)

def max_velocity(c: Creature) -> float:
    return (BEHAV.base_force + c.genes.speed * BEHAV.speed_force) * 0.5

# ---------------- sensing ----------------
def sense_radius(c: Creature) -> float:
    r = BEHAV.base_sense + c.genes.sense_range * BEHAV.sense_scale
    if c.genes.has_sensors:
        r *= 1 + c.genes.sensor_size
    return r

def find_food(me: Creature, foods: List[Food]) -> Optional[Food]:
    """Pick the food with the best diet-weighted value per unit distance inside sense range."""
    r = sense_radius(me)
    best = None
    best_value = 0.0
    for f in foods:
        if not f.alive:
            continue
        d = World.dist(me.pos(), f.pos())
        if d < r:
            value = f.energy_content * diet_preference(me.genes.diet_type, f.food_type)
            ratio = value / (max(1.0, d) * 0.5)
            if ratio > best_value:
                best_value = ratio
                best = f
    me.target_food = best
    return best

def find_mate(world: World, me: Creature, others: List[Creature]) -> Optional[Creature]:
    candidates = [o for o in others
                  if o.alive and o.id != me.id and o.energy > ENERGY.mate_threshold and not o.mated]
    mate = world.nearest_creature(me, candidates, BEHAV.mate_radius)
    if mate is not None and RNG.chance(BEHAV.mate_chance):
        return mate
    return None

# ---------------- adaptation ----------------
def apply_adaptation_visual(me: Creature, environment_type: str, on_color: ColorHook = None) -> None:
    band = CAMOUFLAGE_HUES.get(environment_type)
    if band is not None:
        me.genes.color = max(band[0], min(band[1], me.genes.color))
    elif environment_type != "mountains":
        return
    if on_color is not None:
        on_color(me, environment_type)

def check_environmental_adaptation(me: Creature, on_color: ColorHook = None) -> None:
    if not RNG.chance(me.genes.adaptability * 0.01):
        return
    env = me.current_environment_type or "plains"
    gene = ADAPTIVE_GENES.get(env)
    if gene is not None:
        val = getattr(me.genes, gene)
        if val < BEHAV.adaptation_cap:
            setattr(me.genes, gene, val + BEHAV.adaptation_step)
    if RNG.chance(0.1):
        apply_adaptation_visual(me, env, on_color)

# ---------------- main decision ----------------
def make_decision(world: World, me: Creature, others: List[Creature], now: float,
                  on_color: ColorHook = None) -> Optional[Creature]:
    """
    Once per simulated second: age, pay metabolism, steer, maybe pick food and a mate.
    Returns the chosen mate (breeding is the caller's job) or None.
    """
    if not me.alive or now - me.last_decision_time < ENERGY.decision_interval:
        return None
    me.last_decision_time = now

    me.age += 1
    me.energy = max(0.0, me.energy - ENERGY.metabolism_drain * me.genes.metabolism)
    if me.energy <= 0:
        me.alive = False
        return None

    # good memory -> stick to a course
    if RNG.chance(BEHAV.direction_change_chance * (1 - me.genes.memory * 0.5)):
        me.heading = _unit((RNG.random() * 2 - 1, RNG.random() * 2 - 1))

    search_threshold = 80 if me.genes.metabolism > 0.7 else 70
    if me.energy < search_threshold or RNG.chance(0.5):
        find_food(me, world.food)

    if me.target_food is not None:
        tf = me.target_food
        me.heading = _unit((tf.x - me.x, tf.y - me.y))

    partner = None
    p_mate = BEHAV.base_mate_probability
    if me.low_population_diversity:
        p_mate += BEHAV.diversity_mate_bonus
    if me.energy > ENERGY.mate_threshold and not me.mated and RNG.chance(p_mate):
        partner = find_mate(world, me, others)

    check_environmental_adaptation(me, on_color)
    return partner

# ---------------- motion / eating ----------------
def move(world: World, me: Creature, dt: float) -> None:
    if not me.alive:
        return
    force = BEHAV.base_force + me.genes.speed * BEHAV.speed_force
    hx, hy = me.heading
    world.integrate(me, hx * force, hy * force, dt, BEHAV.velocity_damping)

def check_for_collisions(me: Creature) -> Optional[Food]:
    """Return the target food if it is within reach this tick."""
    if not me.alive:
        return None
    tf = me.target_food
    if tf is None or not tf.alive:
        me.target_food = None
        return None
    if World.dist(me.pos(), tf.pos()) < 1 + me.genes.size:
        me.target_food = None
        return tf
    return None

def eat(me: Creature, food: Food) -> bool:
    if not food.alive:
        return False
    gain = energy_for(food, me.genes.diet_type) * me.genes.health
    me.energy = min(ENERGY.max_energy, me.energy + gain)
    me.eaten += 1
    food.alive = False
    apply_effects_to(food, me)
    return True

# ---------------- environment ----------------
def apply_environmental_effects(me: Creature, environment_type: str, settings: EnvironmentSettings) -> None:
    if settings.temperature == "extreme":
        if RNG.chance(SEASON.extreme_temp_chance):
            me.energy = max(ENERGY.effect_floor, me.energy - SEASON.extreme_temp_drain)
        pref = me.genes.environmental_preference
        if (environment_type == "desert" and pref == "land") or (environment_type == "ocean" and pref == "water"):
            me.energy = min(ENERGY.max_energy, me.energy + SEASON.habitat_bonus)

    if settings.predator_pressure == "high" and RNG.chance(SEASON.attack_chance):
        # big and fast creatures get away
        escape = me.genes.size * 0.7 + me.genes.speed * 0.3
        if RNG.random() > escape:
            me.energy = max(ENERGY.effect_floor, me.energy - SEASON.attack_damage)

def apply_environment_to_creature(me: Creature, environment_type: str) -> None:
    if environment_type == "ocean":
        k = 1.2 if me.genes.limb_type == "swimming" else 0.8
        me.vx, me.vy = _clamp_speed(me.vx * k, me.vy * k, max_velocity(me))
    elif environment_type == "desert":
        if me.velocity() > SEASON.desert_speed_limit:
            me.energy = max(0.0, me.energy - SEASON.desert_move_drain)
