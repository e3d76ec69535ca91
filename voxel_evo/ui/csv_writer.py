# voxel_evo/ui/csv_writer.py
from __future__ import annotations
import csv
import os
import uuid
from typing import Iterable, Dict, List, Optional
from ..sim.models import Creature


class GenerationCsvLogger:
    """
    Append generation-level UI stats to CSV files each time a generation ends.
    - overall_path:  runs/ui_generations.csv
    - species_path:  runs/ui_species_generations.csv  (optional)
    Each run gets its own session_id so logs from several runs can be combined.

    Usage from the UI loop:
        logger = GenerationCsvLogger()
        ...
        if sim.tick():
            logger.append_generation(sim.current_generation, sim.creatures, sim.environment_type)
    """
    def __init__(self,
                 overall_path: str = "runs/ui_generations.csv",
                 species_path: str = "runs/ui_species_generations.csv",
                 enable_species: bool = True):
        self.overall_path = overall_path
        self.species_path = species_path
        self.enable_species = enable_species
        self.session_id = uuid.uuid4().hex[:8]

        self._overall_header = [
            "session_id", "generation", "environment", "n", "species",
            "fitness_min", "fitness_q25", "fitness_median", "fitness_q75", "fitness_max",
            "avg_speed", "avg_size", "avg_sense", "avg_metabolism", "avg_adaptability",
            "notes",
        ]
        self._species_header = [
            "session_id", "generation", "species_id",
            "n", "avg_fitness", "avg_speed", "avg_size", "avg_sense", "avg_color",
        ]
        self._ensure(self.overall_path, self._overall_header)
        if self.enable_species:
            self._ensure(self.species_path, self._species_header)

    # ---------------- internal helpers ----------------
    @staticmethod
    def _ensure(path: str, header: List[str]) -> None:
        if not path:
            return
        folder = os.path.dirname(path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        if not os.path.exists(path):
            with open(path, "w", newline="") as f:
                csv.DictWriter(f, fieldnames=header).writeheader()

    @staticmethod
    def _avg(xs: List[float]) -> float:
        return (sum(xs) / len(xs)) if xs else float("nan")

    @staticmethod
    def _quantiles(xs: List[float]) -> Dict[str, float]:
        """Nearest-rank q25/q50/q75 plus min/max."""
        if not xs:
            nan = float("nan")
            return dict(fitness_min=nan, fitness_q25=nan, fitness_median=nan, fitness_q75=nan, fitness_max=nan)
        q = sorted(xs)
        n = len(q)

        def at(p: float) -> float:
            i = int(round(p * (n - 1)))
            return q[max(0, min(n - 1, i))]
        return dict(
            fitness_min=q[0],
            fitness_q25=at(0.25),
            fitness_median=at(0.50),
            fitness_q75=at(0.75),
            fitness_max=q[-1],
        )

    def _overall_row(self, generation: int, pop: List[Creature], environment_type: str, notes: Optional[str]) -> Dict:
        row = dict(
            session_id=self.session_id,
            generation=generation,
            environment=environment_type,
            n=len(pop),
            species=len({c.species_id for c in pop if c.species_id is not None}),
            avg_speed=self._avg([c.genes.speed for c in pop]),
            avg_size=self._avg([c.genes.size for c in pop]),
            avg_sense=self._avg([c.genes.sense_range for c in pop]),
            avg_metabolism=self._avg([c.genes.metabolism for c in pop]),
            avg_adaptability=self._avg([c.genes.adaptability for c in pop]),
            notes=(notes or ""),
        )
        row.update(self._quantiles([c.fitness for c in pop]))
        return row

    def _species_rows(self, generation: int, pop: List[Creature]) -> Iterable[Dict]:
        by_sp: Dict[int, List[Creature]] = {}
        for c in pop:
            if c.species_id is not None:
                by_sp.setdefault(c.species_id, []).append(c)

        for sid, members in sorted(by_sp.items()):
            yield dict(
                session_id=self.session_id, generation=generation, species_id=sid,
                n=len(members),
                avg_fitness=self._avg([c.fitness for c in members]),
                avg_speed=self._avg([c.genes.speed for c in members]),
                avg_size=self._avg([c.genes.size for c in members]),
                avg_sense=self._avg([c.genes.sense_range for c in members]),
                avg_color=self._avg([c.genes.color for c in members]),
            )

    # ---------------- public API ----------------
    def append_generation(self, generation: int, pop: Iterable[Creature],
                          environment_type: str = "plains", notes: Optional[str] = None):
        """Append one overall row and one row per living species (if enabled)."""
        pop = list(pop)
        if self.overall_path:
            with open(self.overall_path, "a", newline="") as f:
                w = csv.DictWriter(f, fieldnames=self._overall_header)
                w.writerow(self._overall_row(generation, pop, environment_type, notes))

        if self.enable_species and self.species_path:
            self._ensure(self.species_path, self._species_header)
            with open(self.species_path, "a", newline="") as f:
                w = csv.DictWriter(f, fieldnames=self._species_header)
                for r in self._species_rows(generation, pop):
                    w.writerow(r)
