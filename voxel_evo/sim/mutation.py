# voxel_evo/sim/mutation.py
from __future__ import annotations
from typing import Callable, NamedTuple, Optional

from .models import Creature
from .genes import (Genome, GENOME_TRAITS, GENE_RANGES, MUTABLE_BODY_SHAPES,
                    clamp_gene, gene_scale)
from .fitness import evaluate
from .config import REPRO
from .rng import RNG


class MutationResult(NamedTuple):
    genome: Genome
    changed: int      # number of genes touched
    rebuild: bool     # body structure changed enough to rebuild the physical representation


def mutation_factor(mutation_rate: float) -> float:
    return mutation_rate / REPRO.rate_divisor

def _mutate_value(name: str, val: float, factor: float) -> float:
    change = (RNG.random() - 0.5) * REPRO.mutation_scale * factor * gene_scale(name)
    return clamp_gene(name, val + change)

def mutate(genome: Genome, mutation_rate: float) -> MutationResult:
    """Perturb genome in place. Discrete traits other than symmetry/body_shape/limbs are left alone."""
    factor = mutation_factor(mutation_rate)
    changed = 0

    for name in GENOME_TRAITS:
        if name == "symmetry":
            if RNG.chance(factor * 0.5):
                genome.symmetry = "bilateral" if genome.symmetry == "radial" else "radial"
                changed += 1
        elif name == "body_shape":
            if RNG.chance(factor * 0.5):
                genome.body_shape = RNG.choice(MUTABLE_BODY_SHAPES)
                changed += 1
        elif name == "limbs":
            if RNG.chance(factor):
                genome.limbs = max(2, genome.limbs + (-1 if RNG.random() < 0.5 else 1))
                changed += 1
        elif name in GENE_RANGES:
            if RNG.chance(factor):
                setattr(genome, name, _mutate_value(name, getattr(genome, name), factor))
                changed += 1

    rebuild = RNG.chance(factor * 0.5)
    return MutationResult(genome, changed, rebuild)

def mutate_creature(
    creature: Creature,
    mutation_rate: float,
    environment_type: Optional[str] = None,
    on_rebuild: Optional[Callable[[Creature], None]] = None,
) -> MutationResult:
    result = mutate(creature.genes, mutation_rate)
    evaluate(creature, environment_type or creature.current_environment_type or "plains")
    if result.rebuild and on_rebuild is not None:
        on_rebuild(creature)
    return result
