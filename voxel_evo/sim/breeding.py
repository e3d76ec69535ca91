# voxel_evo/sim/breeding.py
from __future__ import annotations
from typing import NamedTuple, Optional

from .models import Creature
from .genes import Genome, GENOME_TRAITS, GENE_RANGES, clamp_gene, gene_scale, genetic_distance
from .mutation import mutate_creature
from .ids import IdAllocator
from .config import REPRO
from .rng import RNG


class BreedResult(NamedTuple):
    child: Creature
    speciated: bool
    parent_species_id: Optional[int]
    rebuild: bool

def crossover(a: Creature, b: Creature) -> Genome:
    """
    Discrete traits come whole from either parent (50/50).
    Continuous traits blend toward the fitter parent:
      bias  = 0.5 + 0.2 * (a.fitness - b.fitness)
      child = a * bias + b * (1 - bias) + noise
    """
    bias = 0.5 + REPRO.fitness_bias_weight * (a.fitness - b.fitness)
    values = {}
    for name in GENOME_TRAITS:
        va = getattr(a.genes, name)
        vb = getattr(b.genes, name)
        if name in GENE_RANGES:
            v = va * bias + vb * (1 - bias)
            v += (RNG.random() - 0.5) * REPRO.crossover_noise * gene_scale(name)
            values[name] = clamp_gene(name, v)
        else:
            values[name] = va if RNG.random() < 0.5 else vb
    return Genome(**values)

def breed(
    a: Creature,
    b: Creature,
    mutation_rate: float,
    creature_ids: IdAllocator,
    species_ids: IdAllocator,
    environment_type: Optional[str] = None,
) -> BreedResult:
    distance = genetic_distance(a.genes, b.genes)
    genes = crossover(a, b)

    # species follows the fitter parent unless the parents are far apart
    parent_species = a.species_id if a.fitness > b.fitness else b.species_id
    species_id = parent_species
    speciated = False
    if distance > REPRO.speciation_distance and RNG.chance(REPRO.speciation_chance):
        species_id = species_ids.next()
        speciated = True

    child = Creature(
        id=creature_ids.next(),
        generation=max(a.generation, b.generation) + 1,
        genes=genes,
        species_id=species_id,
    )
    child.parent_genetic_distance = distance

    env = environment_type or a.current_environment_type or "plains"
    mutated = mutate_creature(child, mutation_rate, env)

    # parents scored in different environments -> more adaptable child
    if a.current_environment_type != b.current_environment_type:
        child.genes.adaptability = min(1.0, child.genes.adaptability * REPRO.adaptability_boost)

    return BreedResult(child, speciated, parent_species, mutated.rebuild)

def mate(
    a: Creature,
    b: Creature,
    mutation_rate: float,
    creature_ids: IdAllocator,
    species_ids: IdAllocator,
    environment_type: Optional[str] = None,
) -> Optional[BreedResult]:
    """Autonomous mating: at most once per generation for either partner."""
    if a.mated or b.mated:
        return None
    result = breed(a, b, mutation_rate, creature_ids, species_ids, environment_type)
    a.mated = True
    b.mated = True
    return result
