import pytest

from voxel_evo.sim.config import ENVIRONMENT_TYPES
from voxel_evo.sim.fitness import evaluate, special_trait_bonus
from voxel_evo.sim.genes import Genome, random_genome
from voxel_evo.sim.models import Creature
from voxel_evo.sim.rng import RNG


def _make_creature(genes=None, **kwargs):
    return Creature(id=0, generation=0, genes=genes or Genome(), **kwargs)


def test_fully_fed_old_creature_saturates_at_one():
    c = _make_creature(age=100, energy=100, eaten=20)
    assert evaluate(c, "plains") == 1.0
    assert c.fitness == 1.0


def test_default_genome_midlife_in_plains():
    # 0.1 survival + 0.15 energy + 0.125 food + 0.25 plains + 0.025 adaptability
    c = _make_creature(age=50, energy=50, eaten=5)
    assert evaluate(c, "plains") == pytest.approx(0.65)


def test_evaluate_records_environment():
    c = _make_creature()
    evaluate(c, "ocean")
    assert c.current_environment_type == "ocean"


def test_fitness_always_in_unit_interval():
    RNG.seed(3)
    for _ in range(100):
        c = _make_creature(random_genome(), age=RNG.randrange(300), energy=RNG.random() * 100,
                           eaten=RNG.randrange(40))
        c.parent_genetic_distance = RNG.random()
        for env in ENVIRONMENT_TYPES:
            assert 0.0 <= evaluate(c, env) <= 1.0


def test_hybrid_vigor_needs_distant_parents():
    near = _make_creature(energy=0)
    far = _make_creature(energy=0)
    near.parent_genetic_distance = 0.3
    far.parent_genetic_distance = 0.5
    assert evaluate(far, "plains") - evaluate(near, "plains") == pytest.approx(0.05)


def test_desert_specialist_bonus():
    g = Genome(temperature_resistance=0.9, metabolism=0.2)
    assert special_trait_bonus(g, "desert", None) == pytest.approx(0.175)
    c = _make_creature(g, energy=0)
    # health 0.1 + resistance 0.27 - metabolism 0.04 + bonus 0.175
    assert evaluate(c, "desert") == pytest.approx(0.505)


def test_swimmers_score_higher_in_ocean():
    walker = _make_creature(Genome(limb_type="generic"), energy=0)
    swimmer = _make_creature(Genome(limb_type="swimming", water_adaptation=0.8), energy=0)
    assert evaluate(swimmer, "ocean") > evaluate(walker, "ocean")
