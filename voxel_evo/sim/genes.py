# voxel_evo/sim/genes.py
from __future__ import annotations
from dataclasses import dataclass, asdict, fields, replace
from typing import Dict, Tuple

from .rng import RNG

COLOR_PATTERNS = ("solid", "striped", "spotted", "gradient")
SYMMETRIES = ("radial", "bilateral", "asymmetric", "segmented")
BODY_SHAPES = ("blocky", "slender", "spherical", "elongated",
               "flattened", "spiked", "amorphous", "composite")
# mutation only ever lands on the first four shapes
MUTABLE_BODY_SHAPES = BODY_SHAPES[:4]
LIMB_TYPES = ("generic", "grasping", "swimming", "jumping", "climbing", "digging")
DIET_TYPES = ("herbivore", "carnivore", "omnivore")
HABITATS = ("land", "water", "air", "subterranean")

# ------------------------------------------------------------
# TRAIT TABLES
# ------------------------------------------------------------
GENE_RANGES: Dict[str, Tuple[float, float]] = {
    "speed": (0.0, 1.0),
    "strength": (0.0, 1.0),
    "size": (0.3, 1.0),
    "health": (0.0, 1.0),
    "color": (0.0, 360.0),
    "pattern_intensity": (0.0, 1.0),
    "shell_thickness": (0.0, 1.0),
    "sensor_size": (0.0, 1.0),
    "spike_length": (0.0, 1.0),
    "limb_length": (0.0, 1.0),
    "limb_thickness": (0.0, 1.0),
    "behavior": (-1.0, 1.0),
    "metabolism": (0.0, 1.0),
    "sense_range": (0.0, 1.0),
    "adaptability": (0.0, 1.0),
    "memory": (0.0, 1.0),
    "temperature_resistance": (0.0, 1.0),
    "water_adaptation": (0.0, 1.0),
    "terrain_adaptation": (0.0, 1.0),
    "camouflage": (0.0, 1.0),
    "toxin_resistance": (0.0, 1.0),
    "mutation_susceptibility": (0.0, 1.0),
    "hybrid_vigor": (0.0, 1.0),
}
CONTINUOUS_TRAITS = tuple(GENE_RANGES)

# inherited whole from one parent, never blended
DISCRETE_TRAITS = (
    "color_pattern", "symmetry", "segment_count", "limbs", "body_shape",
    "has_shell", "has_sensors", "has_spikes",
    "limb_type", "diet_type", "environmental_preference",
)

# sampled by the low-diversity check and by specialization()
CORE_TRAITS = ("speed", "strength", "size", "health", "behavior")


@dataclass
class Genome:
    # basic attributes
    speed: float = 0.5
    strength: float = 0.5
    size: float = 0.65
    health: float = 0.5
    # appearance
    color: float = 180.0
    color_pattern: str = "solid"
    pattern_intensity: float = 0.5
    # body structure
    symmetry: str = "bilateral"
    segment_count: int = 2
    limbs: int = 4
    body_shape: str = "blocky"
    # special features
    has_shell: bool = False
    shell_thickness: float = 0.5
    has_sensors: bool = False
    sensor_size: float = 0.5
    has_spikes: bool = False
    spike_length: float = 0.5
    # limbs
    limb_type: str = "generic"
    limb_length: float = 0.75
    limb_thickness: float = 0.65
    # behavior and ecology
    behavior: float = 0.0              # -1 passive .. 1 aggressive
    metabolism: float = 0.75
    sense_range: float = 0.75
    diet_type: str = "omnivore"
    environmental_preference: str = "land"
    # learning and adaptation
    adaptability: float = 0.5
    memory: float = 0.5
    # environmental adaptations
    temperature_resistance: float = 0.5
    water_adaptation: float = 0.5
    terrain_adaptation: float = 0.5
    camouflage: float = 0.5
    toxin_resistance: float = 0.5
    # evolution traits
    mutation_susceptibility: float = 0.5
    hybrid_vigor: float = 0.5

    def copy(self) -> "Genome":
        return replace(self)

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


GENOME_TRAITS = tuple(f.name for f in fields(Genome))


def clamp_gene(name: str, value: float) -> float:
    lo, hi = GENE_RANGES[name]
    return min(max(value, lo), hi)


def gene_scale(name: str) -> float:
    """Width used to put wide-range traits (color, behavior) on a unit scale."""
    lo, hi = GENE_RANGES[name]
    return max(1.0, hi - lo)


def random_genome() -> Genome:
    u = RNG.random
    return Genome(
        speed=u(),
        strength=u(),
        size=0.3 + u() * 0.7,
        health=u(),
        color=float(int(u() * 360)),
        color_pattern=RNG.choice(COLOR_PATTERNS),
        pattern_intensity=u(),
        symmetry=RNG.choice(SYMMETRIES),
        segment_count=int(2 + u() * 5),
        limbs=int(2 + u() * 8),
        body_shape=RNG.choice(BODY_SHAPES),
        has_shell=u() > 0.7,
        shell_thickness=u(),
        has_sensors=u() > 0.6,
        sensor_size=u(),
        has_spikes=u() > 0.8,
        spike_length=u(),
        limb_type=RNG.choice(LIMB_TYPES),
        limb_length=0.5 + u() * 0.5,
        limb_thickness=0.3 + u() * 0.7,
        behavior=u() * 2 - 1,
        metabolism=0.5 + u() * 0.5,
        sense_range=0.5 + u() * 0.5,
        diet_type=RNG.choice(DIET_TYPES),
        environmental_preference=RNG.choice(HABITATS),
        adaptability=u(),
        memory=u(),
        temperature_resistance=u(),
        water_adaptation=u(),
        terrain_adaptation=u(),
        camouflage=u(),
        toxin_resistance=u(),
        mutation_susceptibility=u(),
        hybrid_vigor=u(),
    )


def genetic_distance(a: Genome, b: Genome) -> float:
    """Mean absolute difference over continuous traits, in raw trait units (color dominates)."""
    total = 0.0
    for name in CONTINUOUS_TRAITS:
        total += abs(getattr(a, name) - getattr(b, name))
    return total / len(CONTINUOUS_TRAITS)


def specialization(genes: Genome) -> Tuple[str, float]:
    values = {name: getattr(genes, name) for name in CORE_TRAITS}
    top = max(values, key=values.get)
    bottom = min(values, key=values.get)
    score = values[top] - values[bottom]
    if score > 0.4:
        return top, score
    return "generalist", score
