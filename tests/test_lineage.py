from voxel_evo.sim.genes import Genome
from voxel_evo.sim.lineage import LineageTracker, species_hue
from voxel_evo.sim.models import Creature


def _make_pop(*species_ids):
    return [Creature(id=i, generation=0, genes=Genome(), species_id=s) for i, s in enumerate(species_ids)]


def _make_tracker():
    lt = LineageTracker()
    lt.register_root_species(0, 0)
    lt.register_root_species(1, 0)
    lt.register_speciation(0, 2, 3)
    return lt


def test_registration_builds_tree():
    lt = _make_tracker()
    assert lt.roots() == [0, 1]
    assert lt.nodes[2].parent_id == 0
    assert lt.nodes[2].birth_generation == 3
    assert lt.children[0] == [2]
    assert lt.nodes[2].hue == species_hue(2)


def test_speciation_without_parent_registers_root():
    lt = LineageTracker()
    lt.register_speciation(None, 5, 2)
    assert lt.roots() == [5]


def test_registration_is_idempotent():
    lt = _make_tracker()
    lt.register_root_species(0, 9)
    lt.register_speciation(1, 2, 9)
    assert lt.nodes[0].birth_generation == 0
    assert lt.nodes[2].parent_id == 0


def test_counts_and_extinction():
    lt = _make_tracker()
    lt.update_from_population(_make_pop(0, 0, 2, None), 4)
    assert lt.nodes[0].current_count == 2
    assert lt.nodes[2].current_count == 1
    assert lt.nodes[1].extinct_generation == 4
    assert lt.living_species() == [0, 2]

    # repopulated species are alive again
    lt.update_from_population(_make_pop(1), 5)
    assert lt.nodes[1].extinct_generation is None
    assert lt.nodes[0].extinct_generation == 5


def test_unknown_species_in_roster_is_registered():
    lt = LineageTracker()
    lt.update_from_population(_make_pop(7), 2)
    assert lt.has_data()
    assert lt.nodes[7].birth_generation == 2


def test_layout_and_segments():
    lt = _make_tracker()
    lt.update_from_population(_make_pop(0, 2), 6)
    assert lt.compute_layout_columns() == {0: 0, 2: 1, 1: 2}
    segs = {s[0]: s for s in lt.segments(8)}
    assert segs[0] == (0, 0, 8, -1, species_hue(0))
    assert segs[1][2] == 6
    assert segs[2][3] == 0
