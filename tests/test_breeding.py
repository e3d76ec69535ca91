import pytest

from voxel_evo.sim.breeding import breed, crossover, mate
from voxel_evo.sim.genes import (
    CONTINUOUS_TRAITS, DISCRETE_TRAITS, GENE_RANGES, Genome, genetic_distance, random_genome,
)
from voxel_evo.sim.ids import IdAllocator
from voxel_evo.sim.models import Creature
from voxel_evo.sim.rng import RNG


def _make_creature(cid, genes=None, species_id=0, fitness=0.0, generation=0):
    c = Creature(id=cid, generation=generation, genes=genes or Genome(), species_id=species_id)
    c.fitness = fitness
    return c


def _opposites():
    lows = Genome(**{n: GENE_RANGES[n][0] for n in CONTINUOUS_TRAITS})
    highs = Genome(**{n: GENE_RANGES[n][1] for n in CONTINUOUS_TRAITS})
    return lows, highs


def test_crossover_inherits_discrete_traits_whole():
    RNG.seed(10)
    for _ in range(50):
        a = _make_creature(1, random_genome())
        b = _make_creature(2, random_genome())
        child = crossover(a, b)
        for name in DISCRETE_TRAITS:
            assert getattr(child, name) in (getattr(a.genes, name), getattr(b.genes, name))
        for name in CONTINUOUS_TRAITS:
            lo, hi = GENE_RANGES[name]
            assert lo <= getattr(child, name) <= hi


def test_crossover_leans_toward_fitter_parent():
    RNG.seed(11)
    lows, highs = _opposites()
    a = _make_creature(1, highs, fitness=1.0)
    b = _make_creature(2, lows, fitness=0.0)
    speeds = [crossover(a, b).speed for _ in range(200)]
    # bias 0.7 toward a; noise is +/-0.05
    assert sum(speeds) / len(speeds) == pytest.approx(0.7, abs=0.02)


def test_breed_sets_lineage_fields():
    RNG.seed(12)
    a = _make_creature(1, random_genome(), species_id=4, fitness=0.8, generation=3)
    b = _make_creature(2, random_genome(), species_id=5, fitness=0.2, generation=5)
    ids, species = IdAllocator(10), IdAllocator(6)
    result = breed(a, b, 5, ids, species, "forest")
    child = result.child
    assert child.id == 10
    assert child.generation == 6
    assert child.parent_genetic_distance == pytest.approx(genetic_distance(a.genes, b.genes))
    assert child.current_environment_type == "forest"
    assert result.parent_species_id == 4
    if not result.speciated:
        assert child.species_id == 4


def test_close_parents_never_speciate():
    RNG.seed(13)
    a = _make_creature(1, species_id=0, fitness=0.1)
    b = _make_creature(2, species_id=0, fitness=0.9)
    ids, species = IdAllocator(), IdAllocator(1)
    for _ in range(200):
        result = breed(a, b, 1, ids, species)
        assert result.speciated is False
        assert result.child.species_id == 0
    assert species.peek() == 1


def test_distant_parents_speciate_about_one_in_ten():
    RNG.seed(14)
    lows, highs = _opposites()
    a = _make_creature(1, lows, species_id=0)
    b = _make_creature(2, highs, species_id=1)
    ids, species = IdAllocator(), IdAllocator(2)
    new_ids = set()
    for _ in range(1000):
        result = breed(a, b, 1, ids, species)
        if result.speciated:
            assert result.child.species_id not in (0, 1)
            new_ids.add(result.child.species_id)
    assert 50 < len(new_ids) < 150
    assert species.peek() == 2 + len(new_ids)


def test_parents_from_different_environments_give_adaptable_children():
    a = _make_creature(1)
    b = _make_creature(2)
    a.current_environment_type = b.current_environment_type = "plains"
    RNG.seed(15)
    same = breed(a, b, 0, IdAllocator(), IdAllocator()).child

    b.current_environment_type = "ocean"
    RNG.seed(15)
    mixed = breed(a, b, 0, IdAllocator(), IdAllocator()).child
    assert mixed.genes.adaptability == pytest.approx(same.genes.adaptability * 1.2)


def test_mate_only_once_per_generation():
    RNG.seed(16)
    a, b, c = _make_creature(1), _make_creature(2), _make_creature(3)
    ids, species = IdAllocator(10), IdAllocator(1)
    assert mate(a, b, 5, ids, species) is not None
    assert a.mated and b.mated
    assert mate(a, c, 5, ids, species) is None
    assert c.mated is False
