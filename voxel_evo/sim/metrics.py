# voxel_evo/sim/metrics.py
from __future__ import annotations
from typing import List, Dict, Optional
import os
import csv

from .models import Creature
from .genes import specialization

def _avg(xs: List[float]) -> float:
    return sum(xs) / max(len(xs), 1)

def summarize_generation(generation: int, population: List[Creature],
                         environment_type: str = "plains", food_count: int = 0,
                         species_count: Optional[int] = None) -> Dict[str, float]:
    fit = [c.fitness for c in population]
    specialists = sum(1 for c in population if specialization(c.genes)[0] != "generalist")
    living_species = len({c.species_id for c in population if c.species_id is not None})
    return dict(
        generation=generation,
        environment=environment_type,
        n=len(population),
        alive=sum(1 for c in population if c.alive),
        species=living_species if species_count is None else species_count,
        specialists=specialists,
        max_fitness=max(fit) if fit else 0.0,
        avg_fitness=_avg(fit),
        avg_speed=_avg([c.genes.speed for c in population]),
        avg_strength=_avg([c.genes.strength for c in population]),
        avg_size=_avg([c.genes.size for c in population]),
        avg_sense=_avg([c.genes.sense_range for c in population]),
        avg_adaptability=_avg([c.genes.adaptability for c in population]),
        food=food_count,
    )

def format_summary(row: Dict[str, float]) -> str:
    return (
        f"Gen {row['generation']:3d} | {row['environment']:<9s} N={row['n']:3d} "
        f"species={row['species']:3d} max_fit={row['max_fitness']:.3f} avg_fit={row['avg_fitness']:.3f} "
        f"speed={row['avg_speed']:.2f} size={row['avg_size']:.2f} sense={row['avg_sense']:.2f} "
        f"adapt={row['avg_adaptability']:.2f} food={row['food']:3d}"
    )

def append_csv(path: str, row: Dict[str, float]) -> None:
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    write_header = not os.path.exists(path)
    with open(path, "a", newline="") as f:
        w = csv.DictWriter(f, fieldnames=list(row.keys()))
        if write_header:
            w.writeheader()
        w.writerow(row)
