# voxel_evo/sim/population.py
from __future__ import annotations
from enum import Enum
from typing import List, Optional
import math

from .models import Creature, Food, EnvironmentSettings
from .config import SimulationConfig, ENVIRONMENT_TYPES, GENERATION, SEASON, REPRO
from .callbacks import SimulationCallbacks
from .genes import random_genome, CORE_TRAITS
from .fitness import evaluate
from .mutation import mutate_creature
from .breeding import BreedResult, breed, mate
from .behaviors import (make_decision, move, check_for_collisions, eat,
                        apply_environmental_effects, apply_environment_to_creature)
from .environment import (SEASONAL_EFFECTS, selection_pressure, is_extreme, adjusted_mutation_rate,
                          food_spawn_rate, next_environment, apply_seasonal_effect, max_food_count)
from .world import World
from .lineage import LineageTracker
from .ids import IdAllocator
from .rng import RNG


class SimState(Enum):
    SEEDING = "seeding"
    RUNNING = "running"
    PAUSED = "paused"


class Simulation:
    """
    Owns the creature roster and the food roster (through its World) and drives
    the generational cycle:

      SEEDING --init_simulation--> PAUSED <--start/pause--> RUNNING
      RUNNING --tick: survivors <= max(3, 0.2 * N)--> next_generation --> RUNNING
      any     --reset--> SEEDING

    Operations on bad preconditions (no selection, dead target, too few creatures)
    return None/False instead of raising.
    """
    def __init__(self, config: Optional[SimulationConfig] = None,
                 callbacks: Optional[SimulationCallbacks] = None):
        self.config = (config or SimulationConfig()).validate()
        self.callbacks = callbacks or SimulationCallbacks()
        if self.config.seed is not None:
            RNG.seed(self.config.seed)

        cfg = self.config
        self.world = World(cfg.world_size, cfg.food_size, cfg.food_energy, cfg.physics_accuracy)
        self.creatures: List[Creature] = []
        self.population_size = cfg.population_size
        self.mutation_rate = cfg.mutation_rate
        self.food_amount = cfg.food_amount
        self.environment_type = cfg.environment_type
        self.settings = EnvironmentSettings.from_config(cfg)
        self.seasonal_changes = cfg.seasonal_changes

        self.state = SimState.SEEDING
        self.current_generation = 0
        self.fitness_history: List[float] = []
        self.selected: Optional[Creature] = None
        self.followed: Optional[Creature] = None

        self.time = 0.0
        self.cycle_time = 0
        self.cycle_direction = 1

        self.creature_ids = IdAllocator()
        self.species_ids = IdAllocator()
        self.lineage = LineageTracker()
        self._births: List[Creature] = []

    # ------------------------------------------------------------
    # roster helpers
    # ------------------------------------------------------------
    @property
    def foods(self) -> List[Food]:
        return self.world.food

    def _new_random_creature(self, generation: int) -> Creature:
        c = Creature(
            id=self.creature_ids.next(),
            generation=generation,
            genes=random_genome(),
            species_id=self.species_ids.next(),
        )
        evaluate(c, self.environment_type)
        self.world.place_creature(c)
        self.lineage.register_root_species(c.species_id, self.current_generation)
        self.callbacks.on_body_created(c)
        return c

    def _adopt_child(self, result: BreedResult) -> Creature:
        child = result.child
        self.world.place_creature(child)
        if result.speciated:
            self.lineage.register_speciation(result.parent_species_id, child.species_id, self.current_generation)
        self.callbacks.on_body_created(child)
        if result.rebuild:
            self.callbacks.on_rebuild_body(child)
        return child

    def _breed(self, a: Creature, b: Creature, rate: float) -> BreedResult:
        return breed(a, b, rate, self.creature_ids, self.species_ids, self.environment_type)

    def species_count(self) -> int:
        return self.species_ids.peek()

    # ------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------
    def init_simulation(self, population_size: Optional[int] = None) -> List[Creature]:
        self.clear_population()
        if population_size is not None and population_size > 0:
            self.population_size = population_size

        self.current_generation = 0
        self.creatures = [self._new_random_creature(0) for _ in range(self.population_size)]
        self.lineage.update_from_population(self.creatures, 0)
        self._flag_diversity()
        self.state = SimState.PAUSED

        self.callbacks.on_generation_change(self.current_generation)
        self.respawn_food()
        self.callbacks.on_population_render()
        self.callbacks.on_chart_update(list(self.fitness_history))

        if self.creatures:
            self.select_creature(RNG.choice(self.creatures))
        return self.creatures

    def clear_population(self) -> None:
        for c in self.creatures:
            self.callbacks.on_body_destroyed(c)
        self.creatures = []
        self._births = []
        self.world.clear_food()

        self.callbacks.on_population_render()
        self.selected = None
        self.followed = None
        self.callbacks.on_creature_select(None)
        self.callbacks.on_fitness_update(0.0)
        self.fitness_history = []
        self.callbacks.on_chart_update([])
        self.callbacks.on_food_count_update(0)

    def reset(self) -> None:
        """Discard everything and go back to SEEDING with the configured environment."""
        self.clear_population()
        self.state = SimState.SEEDING
        self.current_generation = 0
        self.time = 0.0
        self.cycle_time = 0
        self.cycle_direction = 1
        self.environment_type = self.config.environment_type
        self.settings = EnvironmentSettings.from_config(self.config)
        self.lineage = LineageTracker()

    def start(self) -> None:
        if self.state == SimState.SEEDING:
            self.init_simulation()
        self.state = SimState.RUNNING

    def pause(self) -> None:
        if self.state == SimState.RUNNING:
            self.state = SimState.PAUSED

    @property
    def running(self) -> bool:
        return self.state == SimState.RUNNING

    # ------------------------------------------------------------
    # tick
    # ------------------------------------------------------------
    def tick(self, dt: float = 1.0 / 60.0) -> bool:
        """Advance one step. Returns True when a generation transition happened."""
        if self.state != SimState.RUNNING:
            return False
        self.time += dt
        env = self.environment_type

        self._advance_season()
        self._maybe_spawn_food()

        for c in self.creatures:
            if c.alive:
                apply_environmental_effects(c, env, self.settings)

        for c in self.creatures:
            if not c.alive:
                continue
            partner = make_decision(self.world, c, self.creatures, self.time,
                                    self.callbacks.on_adaptation_color)
            if partner is not None:
                self._mate(c, partner)
            if not c.alive:
                continue
            move(self.world, c, dt)
            food = check_for_collisions(c)
            if food is not None:
                self._consume(c, food)
            apply_environment_to_creature(c, env)
            evaluate(c, env)

        if self._births:
            self.creatures.extend(self._births)
            self._births = []
            self.callbacks.on_population_render()

        self.cleanup_dead_creatures()
        return self.check_generation_advance()

    def _mate(self, a: Creature, b: Creature) -> Optional[Creature]:
        result = mate(a, b, self.mutation_rate, self.creature_ids, self.species_ids, self.environment_type)
        if result is None:
            return None
        child = self._adopt_child(result)
        self._births.append(child)
        return child

    def _consume(self, c: Creature, food: Food) -> None:
        if eat(c, food):
            self.world.remove_food(food.id)
            self.callbacks.on_food_removed(food)
            self.callbacks.on_food_count_update(len(self.world.food))

    def cleanup_dead_creatures(self) -> List[Creature]:
        survivors: List[Creature] = []
        dead: List[Creature] = []
        for c in self.creatures:
            if c.alive and c.energy > 0:
                survivors.append(c)
                continue
            c.alive = False
            dead.append(c)
            self.callbacks.on_body_destroyed(c)
            if self.selected is not None and self.selected.id == c.id:
                self.selected = None
                self.callbacks.on_creature_select(None)
            if self.followed is not None and self.followed.id == c.id:
                self.followed = None
        self.creatures = survivors
        return dead

    def survival_threshold(self) -> float:
        return max(GENERATION.min_survivors, self.population_size * GENERATION.survival_fraction)

    def check_generation_advance(self) -> bool:
        alive = sum(1 for c in self.creatures if c.alive)
        if alive <= self.survival_threshold() and self.state == SimState.RUNNING:
            self.next_generation()
            return True
        return False

    # ------------------------------------------------------------
    # generation transition
    # ------------------------------------------------------------
    def next_generation(self) -> List[Creature]:
        env = self.environment_type
        for c in self.creatures:
            evaluate(c, env)
        ranked = sorted(self.creatures, key=lambda c: c.fitness, reverse=True)

        keep = max(GENERATION.min_elites, int(math.floor(len(ranked) * self.selection_pressure())))
        keep = min(keep, self.population_size)
        next_gen = ranked[:keep]
        for c in ranked[keep:]:
            self.callbacks.on_body_destroyed(c)

        rate = self.adjusted_mutation_rate()
        extreme = self.is_extreme_environment()

        while len(next_gen) < self.population_size:
            if not ranked or (self.check_low_diversity(ranked) and RNG.chance(GENERATION.injection_chance)):
                next_gen.append(self._new_random_creature(self.current_generation))
                continue
            p1 = self.select_parent(ranked)
            p2 = self.select_parent(ranked)
            result = self._breed(p1, p2, rate)
            if extreme and RNG.chance(REPRO.extreme_burst_chance):
                mutate_creature(result.child, rate * REPRO.extreme_burst_mult, env)
            next_gen.append(self._adopt_child(result))

        for c in next_gen:
            c.mated = False

        # swap the roster in one step; observers only see the finished population
        self.creatures = next_gen
        self.current_generation += 1

        if self.seasonal_changes and self.current_generation % GENERATION.environment_cycle_every == 0:
            self.cyclic_environment_change()

        self.lineage.update_from_population(self.creatures, self.current_generation)
        self._flag_diversity()

        self.callbacks.on_generation_change(self.current_generation)
        self.callbacks.on_population_render()

        max_fitness = self.creatures[0].fitness if self.creatures else 0.0
        self.fitness_history.append(max_fitness * 100)
        if len(self.fitness_history) > GENERATION.history_length:
            self.fitness_history = self.fitness_history[-GENERATION.history_length:]
        self.callbacks.on_fitness_update(max_fitness)
        self.callbacks.on_chart_update(list(self.fitness_history))

        if self.creatures:
            self.select_creature(self.creatures[0])
        self.respawn_food()
        return self.creatures

    def select_parent(self, pool: Optional[List[Creature]] = None) -> Optional[Creature]:
        """Roulette wheel over cumulative fitness; first creature whose running sum reaches the roll."""
        pool = self.creatures if pool is None else pool
        if not pool:
            return None
        total = sum(c.fitness for c in pool)
        roll = RNG.random() * total
        running = 0.0
        for c in pool:
            running += c.fitness
            if running >= roll:
                return c
        return pool[0]

    def check_low_diversity(self, pool: Optional[List[Creature]] = None) -> bool:
        pool = self.creatures if pool is None else pool
        if len(pool) < 2:
            return True
        n = min(GENERATION.diversity_sample, len(pool))
        samples = [pool[RNG.randrange(len(pool))] for _ in range(n)]

        total_var = 0.0
        for gene in CORE_TRAITS:
            values = [getattr(c.genes, gene) for c in samples]
            mean = sum(values) / len(values)
            total_var += sum((v - mean) ** 2 for v in values) / len(values)
        return total_var / len(CORE_TRAITS) < GENERATION.diversity_threshold

    def _flag_diversity(self) -> None:
        low = self.check_low_diversity()
        for c in self.creatures:
            c.low_population_diversity = low

    # ------------------------------------------------------------
    # environment
    # ------------------------------------------------------------
    def selection_pressure(self) -> float:
        return selection_pressure(self.environment_type, self.settings.competition_intensity)

    def is_extreme_environment(self) -> bool:
        return is_extreme(self.environment_type, self.settings)

    def adjusted_mutation_rate(self) -> float:
        boost = any(c.evolution_boost for c in self.creatures)
        return adjusted_mutation_rate(self.mutation_rate, self.environment_type, self.settings,
                                      self.current_generation, boost)

    def set_environment_type(self, environment_type: str) -> bool:
        if environment_type not in ENVIRONMENT_TYPES:
            return False
        self.environment_type = environment_type
        for c in self.creatures:
            evaluate(c, environment_type)
        self.creatures.sort(key=lambda c: c.fitness, reverse=True)
        if self.selected is not None:
            self.callbacks.on_creature_select(self.selected)
        self.callbacks.on_population_render()
        self.callbacks.on_environment_change(environment_type)
        return True

    def cyclic_environment_change(self) -> str:
        self.set_environment_type(next_environment(self.environment_type))
        return self.environment_type

    def apply_seasonal_effect(self, effect: Optional[str] = None) -> str:
        effect = effect or RNG.choice(SEASONAL_EFFECTS)
        apply_seasonal_effect(self.settings, effect)
        self.callbacks.on_seasonal_change(effect)
        return effect

    def _advance_season(self) -> None:
        if not self.seasonal_changes:
            return
        self.cycle_time += self.cycle_direction
        if self.cycle_time >= SEASON.cycle_period or self.cycle_time <= 0:
            self.cycle_direction *= -1
            if self.cycle_time >= SEASON.cycle_period and RNG.chance(SEASON.effect_chance):
                self.apply_seasonal_effect()

    # ------------------------------------------------------------
    # food
    # ------------------------------------------------------------
    def max_food_count(self) -> int:
        return max_food_count(self.config.max_food, self.food_amount)

    def food_spawn_rate(self) -> float:
        return food_spawn_rate(self.environment_type, self.seasonal_changes,
                               self.cycle_time, SEASON.cycle_period)

    def spawn_food(self) -> Optional[Food]:
        if len(self.world.food) >= self.max_food_count():
            return None
        food = self.world.spawn_food()
        if self.settings.food_distribution == "clustered" and RNG.chance(SEASON.cluster_chance):
            for _ in range(RNG.randrange(3) + 1):
                self.world.spawn_food_near(food, SEASON.cluster_radius)
        self.callbacks.on_food_count_update(len(self.world.food))
        return food

    def _maybe_spawn_food(self) -> None:
        if len(self.world.food) < self.max_food_count() and RNG.chance(self.food_spawn_rate()):
            self.spawn_food()

    def respawn_food(self) -> None:
        for f in self.world.food:
            self.callbacks.on_food_removed(f)
        self.world.clear_food()
        for _ in range(self.max_food_count()):
            self.spawn_food()
        self.callbacks.on_food_count_update(len(self.world.food))

    # ------------------------------------------------------------
    # settings
    # ------------------------------------------------------------
    def set_food_amount(self, scale: float) -> None:
        self.food_amount = scale
        while len(self.world.food) > self.max_food_count():
            self.callbacks.on_food_removed(self.world.food.pop())
        self.callbacks.on_food_count_update(len(self.world.food))

    def set_mutation_rate(self, rate: float) -> None:
        self.mutation_rate = rate

    def set_physics_accuracy(self, substeps: int) -> None:
        self.world.substeps = max(1, int(substeps))

    # ------------------------------------------------------------
    # player actions
    # ------------------------------------------------------------
    def select_creature(self, creature: Optional[Creature]) -> None:
        self.selected = creature
        self.callbacks.on_creature_select(creature)

    def toggle_follow_creature(self) -> Optional[bool]:
        if self.selected is None:
            return None
        if self.followed is not None and self.followed.id == self.selected.id:
            self.followed = None
            return False
        self.followed = self.selected
        return True

    def breed_selected_creature(self) -> Optional[Creature]:
        """Breed the selection with a random other creature; the child joins the roster."""
        sel = self.selected
        if sel is None or not sel.alive or len(self.creatures) < 2:
            return None
        mates = [c for c in self.creatures if c.id != sel.id]
        if not mates:
            return None
        result = self._breed(sel, RNG.choice(mates), self.mutation_rate)
        child = self._adopt_child(result)
        self.creatures.append(child)
        self.select_creature(child)
        self.callbacks.on_population_render()
        return child

    def force_mutate_creature(self) -> bool:
        sel = self.selected
        if sel is None or not sel.alive:
            return False
        mutate_creature(sel, self.mutation_rate * REPRO.forced_mutation_mult,
                        self.environment_type, self.callbacks.on_rebuild_body)
        self.callbacks.on_creature_select(sel)
        self.callbacks.on_population_render()
        return True
