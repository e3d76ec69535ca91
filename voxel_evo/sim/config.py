# voxel_evo/sim/config.py
from dataclasses import dataclass
from typing import Optional

ENVIRONMENT_TYPES = ("plains", "forest", "ocean", "mountains", "desert", "predators")

# ------------------------------------------------------------
# USER-FACING OPTIONS (one instance per Simulation)
# ------------------------------------------------------------
@dataclass(frozen=False)  # mutable so UI can tweak rates at runtime
class SimulationConfig:
    world_size: float = 30.0
    food_size: float = 1.0
    food_energy: float = 50.0
    max_food: int = 30
    population_size: int = 12
    mutation_rate: float = 5.0        # UI scale 1..10
    physics_accuracy: int = 3         # substeps, passed through to the world collaborator
    food_amount: float = 10.0         # max food = max_food * food_amount / 10
    environment_type: str = "plains"
    # environment settings
    terrain: str = "flat"
    temperature: str = "moderate"
    food_distribution: str = "uniform"
    predator_pressure: str = "low"
    mutation_stimulus: float = 1.0
    competition_intensity: float = 1.0
    seasonal_changes: bool = False
    seed: Optional[int] = None

    def validate(self) -> "SimulationConfig":
        if self.environment_type not in ENVIRONMENT_TYPES:
            raise ValueError(f"unknown environment type: {self.environment_type!r}")
        if self.population_size <= 0:
            raise ValueError("population_size must be positive")
        if self.world_size <= 0:
            raise ValueError("world_size must be positive")
        return self

# ------------------------------------------------------------
# ENERGY / LIFECYCLE
# ------------------------------------------------------------
@dataclass(frozen=True)
class EnergyConfig:
    start_energy: float = 100.0
    max_energy: float = 100.0
    metabolism_drain: float = 0.2      # per decision, scaled by metabolism gene
    mate_threshold: float = 70.0
    decision_interval: float = 1.0     # simulated seconds between decisions
    effect_floor: float = 10.0         # environmental hits never push energy below this

# ------------------------------------------------------------
# BEHAVIOR TUNING
# ------------------------------------------------------------
@dataclass(frozen=True)
class BehaviorConfig:
    base_force: float = 5.0
    speed_force: float = 15.0
    velocity_damping: float = 0.9
    direction_change_chance: float = 0.3
    base_sense: float = 5.0
    sense_scale: float = 10.0
    mate_radius: float = 10.0
    mate_chance: float = 0.7
    base_mate_probability: float = 0.1
    diversity_mate_bonus: float = 0.1
    adaptation_step: float = 0.01
    adaptation_cap: float = 0.8

# ------------------------------------------------------------
# REPRODUCTION / SPECIATION
# ------------------------------------------------------------
@dataclass(frozen=True)
class ReproConfig:
    crossover_noise: float = 0.1
    fitness_bias_weight: float = 0.2
    mutation_scale: float = 0.3
    rate_divisor: float = 50.0         # UI rate 1..10 -> factor 0.02..0.2
    speciation_distance: float = 0.5
    speciation_chance: float = 0.1
    hybrid_distance: float = 0.4
    adaptability_boost: float = 1.2
    forced_mutation_mult: float = 2.0
    extreme_burst_mult: float = 1.5
    extreme_burst_chance: float = 0.3

# ------------------------------------------------------------
# GENERATIONS
# ------------------------------------------------------------
@dataclass(frozen=True)
class GenerationConfig:
    min_survivors: int = 3
    survival_fraction: float = 0.2
    min_elites: int = 3
    injection_chance: float = 0.2
    diversity_sample: int = 5
    diversity_threshold: float = 0.05
    history_length: int = 15
    environment_cycle_every: int = 5

# ------------------------------------------------------------
# SEASONS / ENVIRONMENT EFFECTS
# ------------------------------------------------------------
@dataclass(frozen=True)
class SeasonConfig:
    cycle_period: int = 5000           # ticks
    effect_chance: float = 0.2
    extreme_temp_chance: float = 0.1
    extreme_temp_drain: float = 1.0
    habitat_bonus: float = 0.5
    attack_chance: float = 0.005
    attack_damage: float = 20.0
    desert_move_drain: float = 0.01
    desert_speed_limit: float = 2.0
    cluster_chance: float = 0.3
    cluster_radius: float = 3.0

# ------------------------------------------------------------
# EXPORT SINGLETONS
# ------------------------------------------------------------
ENERGY = EnergyConfig()
BEHAV = BehaviorConfig()
REPRO = ReproConfig()
GENERATION = GenerationConfig()
SEASON = SeasonConfig()
