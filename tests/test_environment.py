import pytest

from voxel_evo.sim.behaviors import apply_environment_to_creature, apply_environmental_effects, max_velocity
from voxel_evo.sim.config import ENVIRONMENT_TYPES
from voxel_evo.sim.environment import (
    ENVIRONMENT_CYCLE, adjusted_mutation_rate, apply_seasonal_effect, food_spawn_rate,
    is_extreme, max_food_count, next_environment, selection_pressure,
)
from voxel_evo.sim.genes import Genome
from voxel_evo.sim.models import Creature, EnvironmentSettings
from voxel_evo.sim.rng import RNG


def _make_creature(**genes):
    return Creature(id=0, generation=0, genes=Genome(**genes))


def test_selection_pressure_always_bounded():
    for env in ENVIRONMENT_TYPES:
        for intensity in (0.0, 0.5, 1.0, 1.5, 2.0, 3.0):
            assert 0.1 <= selection_pressure(env, intensity) <= 0.5


def test_selection_pressure_per_environment():
    assert selection_pressure("plains", 1.0) == pytest.approx(0.4)
    assert selection_pressure("desert", 1.0) == pytest.approx(0.2)
    assert selection_pressure("ocean", 1.0) == pytest.approx(0.3)
    assert selection_pressure("forest", 0.5) == pytest.approx(0.5)
    assert selection_pressure("plains", 2.0) == pytest.approx(0.1)


def test_environment_cycle_is_a_ring_without_predators():
    env = "plains"
    visited = []
    for _ in range(len(ENVIRONMENT_CYCLE)):
        env = next_environment(env)
        visited.append(env)
    assert env == "plains"
    assert set(visited) == set(ENVIRONMENT_CYCLE)
    assert "predators" not in visited
    assert next_environment("predators") == "plains"


def test_extreme_environments():
    calm = EnvironmentSettings()
    assert is_extreme("desert", calm)
    assert is_extreme("predators", calm)
    assert not is_extreme("plains", calm)
    assert is_extreme("plains", EnvironmentSettings(temperature="extreme"))
    assert is_extreme("ocean", EnvironmentSettings(predator_pressure="high"))


def test_adjusted_mutation_rate_multipliers():
    calm = EnvironmentSettings()
    assert adjusted_mutation_rate(5, "plains", calm, 10, False) == pytest.approx(5)
    assert adjusted_mutation_rate(5, "desert", calm, 10, False) == pytest.approx(7.5)
    assert adjusted_mutation_rate(5, "desert", calm, 2, False) == pytest.approx(9)
    assert adjusted_mutation_rate(5, "desert", calm, 2, True) == pytest.approx(11.7)
    stimulated = EnvironmentSettings(mutation_stimulus=2.0)
    assert adjusted_mutation_rate(5, "plains", stimulated, 10, False) == pytest.approx(10)


def test_food_spawn_rate():
    assert food_spawn_rate("plains", False, 0, 5000) == pytest.approx(0.08)
    assert food_spawn_rate("ocean", False, 0, 5000) == pytest.approx(0.05)
    assert food_spawn_rate("plains", True, 1250, 5000) == pytest.approx(0.12)
    assert food_spawn_rate("plains", True, 3750, 5000) == pytest.approx(0.04)


def test_max_food_count_scales_with_amount():
    assert max_food_count(30, 10) == 30
    assert max_food_count(30, 5) == 15
    assert max_food_count(30, 0) == 0


@pytest.mark.parametrize("effect,field,value", [
    ("drought", "food_distribution", "sparse"),
    ("abundance", "food_distribution", "abundant"),
    ("cold", "temperature", "cold"),
    ("optimal", "temperature", "moderate"),
    ("predation", "predator_pressure", "high"),
])
def test_seasonal_effects(effect, field, value):
    s = EnvironmentSettings()
    apply_seasonal_effect(s, effect)
    assert getattr(s, field) == value


def test_harsh_effects_never_drop_energy_below_floor():
    RNG.seed(30)
    harsh = EnvironmentSettings(temperature="extreme", predator_pressure="high")
    c = _make_creature(size=0.3, speed=0.0, environmental_preference="air")
    c.energy = 12
    for _ in range(5000):
        apply_environmental_effects(c, "plains", harsh)
        assert 10 <= c.energy <= 12


def test_matching_habitat_recovers_in_extreme_heat():
    c = _make_creature(environmental_preference="land")
    c.energy = 50
    for _ in range(100):
        apply_environmental_effects(c, "desert", EnvironmentSettings(temperature="extreme"))
    assert c.energy > 50


def test_ocean_drag_keeps_speed_bounded():
    c = _make_creature(limb_type="swimming", speed=1.0)
    c.vx, c.vy = 8.0, 0.0
    for _ in range(50):
        apply_environment_to_creature(c, "ocean")
    assert c.velocity() <= max_velocity(c) + 1e-9

    slow = _make_creature(limb_type="generic")
    slow.vx = 1.0
    apply_environment_to_creature(slow, "ocean")
    assert slow.vx == pytest.approx(0.8)


def test_desert_charges_for_fast_movement():
    c = _make_creature()
    c.energy = 50
    c.vx = 3.0
    apply_environment_to_creature(c, "desert")
    assert c.energy == pytest.approx(49.99)
    c.vx = 1.0
    apply_environment_to_creature(c, "desert")
    assert c.energy == pytest.approx(49.99)
