import pytest

from voxel_evo.sim.genes import CONTINUOUS_TRAITS, GENE_RANGES, MUTABLE_BODY_SHAPES, gene_scale, random_genome
from voxel_evo.sim.models import Creature
from voxel_evo.sim.mutation import mutate, mutate_creature, mutation_factor
from voxel_evo.sim.rng import RNG


def test_mutation_factor_scales_ui_rate():
    assert mutation_factor(5) == pytest.approx(0.1)
    assert mutation_factor(50) == pytest.approx(1.0)


def test_zero_rate_changes_nothing():
    RNG.seed(4)
    g = random_genome()
    before = g.copy()
    result = mutate(g, 0)
    assert result.changed == 0
    assert result.rebuild is False
    assert g == before


def test_full_rate_touches_every_continuous_trait_and_stays_in_range():
    RNG.seed(5)
    for _ in range(20):
        g = random_genome()
        result = mutate(g, 50)
        assert result.changed >= len(CONTINUOUS_TRAITS) + 1
        for name in CONTINUOUS_TRAITS:
            lo, hi = GENE_RANGES[name]
            assert lo <= getattr(g, name) <= hi
        assert g.limbs >= 2


def test_small_rate_makes_small_steps():
    RNG.seed(6)
    for _ in range(50):
        g = random_genome()
        before = g.copy()
        mutate(g, 5)
        for name in CONTINUOUS_TRAITS:
            step = abs(getattr(g, name) - getattr(before, name))
            assert step <= 0.5 * 0.3 * 0.1 * gene_scale(name) + 1e-9


def test_only_structural_discrete_traits_mutate():
    RNG.seed(7)
    for _ in range(30):
        g = random_genome()
        before = g.copy()
        mutate(g, 50)
        assert g.diet_type == before.diet_type
        assert g.limb_type == before.limb_type
        assert g.has_shell == before.has_shell
        assert g.segment_count == before.segment_count
        assert g.environmental_preference == before.environmental_preference
        if g.body_shape != before.body_shape:
            assert g.body_shape in MUTABLE_BODY_SHAPES
        if g.symmetry != before.symmetry:
            assert g.symmetry in ("radial", "bilateral")


def test_mutate_creature_reevaluates_and_reports_rebuilds():
    RNG.seed(8)
    rebuilt = []
    flagged = 0
    for i in range(50):
        c = Creature(id=i, generation=0, genes=random_genome())
        c.current_environment_type = "desert"
        result = mutate_creature(c, 50, on_rebuild=rebuilt.append)
        flagged += int(result.rebuild)
        assert c.current_environment_type == "desert"
        assert 0.0 <= c.fitness <= 1.0
    assert len(rebuilt) == flagged
    assert 0 < flagged < 50


def _speed_changes(rate, trials=5000):
    changed = 0
    for _ in range(trials):
        g = random_genome()
        g.speed = 0.5
        mutate(g, rate)
        changed += int(g.speed != 0.5)
    return changed


def test_higher_rate_mutates_continuous_traits_more_often():
    RNG.seed(9)
    low = _speed_changes(1)
    high = _speed_changes(10)
    # factor 0.02 vs 0.2 per trait
    assert low / 5000 == pytest.approx(0.02, abs=0.01)
    assert high / 5000 == pytest.approx(0.2, abs=0.03)
    assert high > 5 * low
