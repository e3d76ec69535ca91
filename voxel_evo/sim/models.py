# voxel_evo/sim/models.py
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .genes import Genome
from .config import SimulationConfig, ENERGY

Vec = Tuple[float, float]

@dataclass
class EnvironmentSettings:
    terrain: str = "flat"
    temperature: str = "moderate"          # cold | moderate | extreme
    food_distribution: str = "uniform"     # uniform | clustered | sparse | abundant
    predator_pressure: str = "low"         # low | high
    mutation_stimulus: float = 1.0
    competition_intensity: float = 1.0

    @classmethod
    def from_config(cls, cfg: SimulationConfig) -> "EnvironmentSettings":
        return cls(
            terrain=cfg.terrain,
            temperature=cfg.temperature,
            food_distribution=cfg.food_distribution,
            predator_pressure=cfg.predator_pressure,
            mutation_stimulus=cfg.mutation_stimulus,
            competition_intensity=cfg.competition_intensity,
        )

@dataclass
class Food:
    id: int
    food_type: str                          # plant | fruit | mushroom | meat | mineral
    energy_content: float
    size: float
    nutritional_value: Dict[str, float]
    lifespan: int
    x: float
    y: float
    special_effect: Optional[str] = None    # boost | toxic | evolution_boost
    alive: bool = True

    def pos(self) -> Vec:
        return (self.x, self.y)

@dataclass
class Creature:
    id: int
    generation: int
    genes: Genome
    species_id: Optional[int] = None
    age: int = 0
    energy: float = ENERGY.start_energy
    fitness: float = 0.0
    eaten: int = 0
    mated: bool = False
    alive: bool = True

    parent_genetic_distance: Optional[float] = None
    current_environment_type: Optional[str] = None
    evolution_boost: bool = False
    low_population_diversity: bool = False

    # Spatial state, written by the world collaborator
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    heading: Vec = (0.0, 0.0)
    target_food: Optional[Food] = field(default=None, repr=False)
    last_decision_time: float = float("-inf")

    def pos(self) -> Vec:
        return (self.x, self.y)

    def velocity(self) -> float:
        return (self.vx ** 2 + self.vy ** 2) ** 0.5
