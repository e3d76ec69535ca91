import math

import pytest

from voxel_evo.sim.behaviors import eat, find_food
from voxel_evo.sim.food import (
    FOOD_TYPES, apply_effects_to, create_food, diet_preference, energy_for, food_position,
)
from voxel_evo.sim.genes import Genome
from voxel_evo.sim.models import Creature, Food
from voxel_evo.sim.rng import RNG

EXPECTED_ENERGY = {"plant": 50, "fruit": 80, "mushroom": 30, "meat": 100, "mineral": 20}


def _make_food(food_type="plant", energy=50.0, special=None, x=0.0, y=0.0):
    return Food(id=1, food_type=food_type, energy_content=energy, size=1.0,
                nutritional_value={}, lifespan=100, x=x, y=y, special_effect=special)


def _make_creature(**genes):
    return Creature(id=0, generation=0, genes=Genome(**genes))


def test_created_food_matches_type_profile():
    RNG.seed(20)
    seen = set()
    for i in range(500):
        f = create_food(i, 30, 1, 50)
        seen.add(f.food_type)
        assert f.energy_content == pytest.approx(EXPECTED_ENERGY[f.food_type])
        if f.food_type == "mushroom":
            assert f.special_effect in ("boost", "toxic")
        elif f.food_type == "mineral":
            assert f.special_effect == "evolution_boost"
        else:
            assert f.special_effect is None
        assert abs(f.x) <= 15 and abs(f.y) <= 15
    assert seen == set(FOOD_TYPES)


def test_minerals_sit_on_a_ring():
    RNG.seed(21)
    for _ in range(100):
        x, y = food_position("mineral", 30)
        assert 7.5 - 1e-9 <= math.hypot(x, y) <= 12.0 + 1e-9


@pytest.mark.parametrize("food_type,energy,diet,special,expected", [
    ("plant", 50, "herbivore", None, 75),
    ("plant", 50, "carnivore", None, 15),
    ("meat", 100, "carnivore", None, 180),
    ("meat", 100, "herbivore", None, 20),
    ("mushroom", 30, "omnivore", "boost", 54),
    ("mushroom", 30, "omnivore", "toxic", 18),
    ("mineral", 20, "omnivore", "evolution_boost", 20),
])
def test_energy_for_diet(food_type, energy, diet, special, expected):
    assert energy_for(_make_food(food_type, energy, special), diet) == expected


def test_diet_preference():
    assert diet_preference("herbivore", "plant") == 1.5
    assert diet_preference("herbivore", "fruit") == 1.3
    assert diet_preference("herbivore", "meat") == 0.5
    assert diet_preference("carnivore", "meat") == 1.5
    assert diet_preference("carnivore", "plant") == 0.6
    assert diet_preference("omnivore", "mineral") == 1.0


def test_special_effects_respect_energy_bounds():
    c = _make_creature()
    c.energy = 15
    apply_effects_to(_make_food("mushroom", 30, "toxic"), c)
    assert c.energy == 10
    c.energy = 90
    apply_effects_to(_make_food("mushroom", 30, "boost"), c)
    assert c.energy == 100
    apply_effects_to(_make_food("mineral", 20, "evolution_boost"), c)
    assert c.evolution_boost is True


def test_eat_scales_by_health_and_consumes_once():
    c = _make_creature(health=0.5, diet_type="omnivore")
    c.energy = 50
    f = _make_food("plant", 50)
    assert eat(c, f) is True
    assert c.energy == pytest.approx(75)
    assert c.eaten == 1
    assert f.alive is False
    assert eat(c, f) is False
    assert c.eaten == 1


def test_eat_caps_energy():
    c = _make_creature(health=1.0, diet_type="carnivore")
    c.energy = 90
    eat(c, _make_food("meat", 100))
    assert c.energy == 100


def test_find_food_prefers_value_per_distance():
    c = _make_creature(diet_type="carnivore", sense_range=1.0)
    plant = _make_food("plant", 50, x=2.0)
    meat = _make_food("meat", 100, x=4.0)
    meat.id = 2
    assert find_food(c, [plant, meat]) is meat
    assert c.target_food is meat


def test_find_food_ignores_out_of_range():
    c = _make_creature(sense_range=0.0)
    far = _make_food("plant", 50, x=10.0)
    assert find_food(c, [far]) is None
