# voxel_evo/sim/lineage.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Iterable
from .models import Creature

@dataclass
class SpeciesNode:
    species_id: int
    name: str
    hue: int
    parent_id: Optional[int]
    birth_generation: int
    extinct_generation: Optional[int] = None
    current_count: int = 0

def species_hue(species_id: int) -> int:
    # spread neighbouring ids around the colour wheel
    return (species_id * 47) % 360

class LineageTracker:
    """
    Tracks species as nodes in a phylogenetic tree:
      - Nodes are species ids (with parent->child relationships from speciation)
      - birth_generation recorded on first appearance
      - extinct_generation set when the roster holds no member any more
      - current_count updated every generation
    """
    def __init__(self):
        self.nodes: Dict[int, SpeciesNode] = {}
        self.children: Dict[int, List[int]] = {}  # species_id -> child ids
        self._order: List[int] = []               # creation order for stable layout

    # ---- registration ----
    def register_root_species(self, species_id: int, generation: int):
        if species_id in self.nodes:
            return
        self.nodes[species_id] = SpeciesNode(
            species_id=species_id,
            name=f"Species {species_id}",
            hue=species_hue(species_id),
            parent_id=None,
            birth_generation=generation,
        )
        self.children[species_id] = []
        self._order.append(species_id)

    def register_speciation(self, parent_id: Optional[int], child_id: int, generation: int):
        if parent_id is None:
            self.register_root_species(child_id, generation)
            return
        if parent_id not in self.nodes:
            self.register_root_species(parent_id, generation)  # fallback
        if child_id not in self.nodes:
            self.nodes[child_id] = SpeciesNode(
                species_id=child_id,
                name=f"Species {child_id}",
                hue=species_hue(child_id),
                parent_id=parent_id,
                birth_generation=generation,
            )
            self.children.setdefault(parent_id, []).append(child_id)
            self.children.setdefault(child_id, [])
            self._order.append(child_id)

    # ---- per-generation updates ----
    def update_from_population(self, creatures: Iterable[Creature], generation: int):
        for node in self.nodes.values():
            node.current_count = 0

        for c in creatures:
            if c.species_id is None:
                continue
            if c.species_id not in self.nodes:
                self.register_root_species(c.species_id, generation)
            self.nodes[c.species_id].current_count += 1

        for node in self.nodes.values():
            if node.current_count > 0:
                node.extinct_generation = None
            elif node.extinct_generation is None and node.birth_generation <= generation:
                node.extinct_generation = generation

    # ---- queries ----
    def living_species(self) -> List[int]:
        return [sid for sid in self._order if self.nodes[sid].current_count > 0]

    def roots(self) -> List[int]:
        return [sid for sid in self._order if self.nodes[sid].parent_id is None]

    def compute_layout_columns(self) -> Dict[int, int]:
        """
        Assign an x-column to each species to draw a tidy tree:
        roots in creation order, DFS over children in creation order.
        """
        columns: Dict[int, int] = {}
        col_counter = 0

        def dfs(sid: int):
            nonlocal col_counter
            columns[sid] = col_counter
            col_counter += 1
            for child in self.children.get(sid, []):
                dfs(child)

        for r in self.roots():
            dfs(r)
        return columns

    def segments(self, current_generation: int) -> List[Tuple[int, int, int, int, int]]:
        """
        Returns vertical segments: (species_id, g0, g1, parent_id, hue)
        g0 = birth generation, g1 = extinction generation or current_generation
        """
        segs = []
        for sid in self._order:
            node = self.nodes[sid]
            g1 = node.extinct_generation if node.extinct_generation is not None else current_generation
            segs.append((sid, node.birth_generation, g1,
                         node.parent_id if node.parent_id is not None else -1, node.hue))
        return segs

    def has_data(self) -> bool:
        return len(self.nodes) > 0
