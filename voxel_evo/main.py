# voxel_evo/main.py
from __future__ import annotations
import argparse
from typing import List, Dict

from .sim.config import SimulationConfig, ENVIRONMENT_TYPES
from .sim.population import Simulation
from .sim.callbacks import SimulationCallbacks
from .sim.metrics import summarize_generation, format_summary, append_csv

TICK_DT = 1.0 / 60.0

def build_parser() -> argparse.ArgumentParser:
    defaults = SimulationConfig()
    parser = argparse.ArgumentParser(description="Voxel evolution: generational artificial-life simulation")
    parser.add_argument("--generations", type=int, default=20)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--pop", type=int, default=defaults.population_size)
    parser.add_argument("--env", type=str, default=defaults.environment_type, choices=ENVIRONMENT_TYPES)
    parser.add_argument("--mutation-rate", type=float, default=defaults.mutation_rate)
    parser.add_argument("--seasonal", action="store_true", help="enable seasonal cycle and environment rotation")
    parser.add_argument("--csv", type=str, default="", help="append one row per generation to this CSV")
    parser.add_argument("--plot", action="store_true", help="plot fitness history at the end")
    parser.add_argument("--max-ticks", type=int, default=200_000, help="stop even if generations are not reached")
    parser.add_argument("--ui", action="store_true", help="launch real-time UI")
    return parser

def config_from_args(args) -> SimulationConfig:
    return SimulationConfig(
        population_size=args.pop,
        environment_type=args.env,
        mutation_rate=args.mutation_rate,
        seasonal_changes=args.seasonal,
        seed=args.seed,
    ).validate()

def run_headless(cfg: SimulationConfig, generations: int, max_ticks: int, csv_path: str = "") -> List[Dict[str, float]]:
    rows: List[Dict[str, float]] = []
    callbacks = SimulationCallbacks(
        on_environment_change=lambda env: print(f"[INFO] environment -> {env}"),
        on_seasonal_change=lambda effect: print(f"[INFO] seasonal effect: {effect}"),
    )
    sim = Simulation(cfg, callbacks)
    sim.init_simulation()
    sim.start()

    ticks = 0
    while sim.current_generation < generations and ticks < max_ticks:
        ticks += 1
        if not sim.tick(TICK_DT):
            continue
        row = summarize_generation(sim.current_generation, sim.creatures, sim.environment_type,
                                   len(sim.foods), len(sim.lineage.living_species()))
        rows.append(row)
        print(format_summary(row))
        if csv_path:
            append_csv(csv_path, row)

    if sim.current_generation < generations:
        print(f"[WARN] stopped after {ticks} ticks at generation {sim.current_generation}")
    else:
        print(f"[OK] {generations} generations in {ticks} ticks, {sim.species_count()} species seen")
    return rows

def run():
    args = build_parser().parse_args()
    try:
        cfg = config_from_args(args)
    except ValueError as err:
        print(f"[ERROR] {err}")
        raise SystemExit(2)

    if args.ui:
        from .ui.app import run_ui
        run_ui(cfg)
        return

    rows = run_headless(cfg, args.generations, args.max_ticks, args.csv)

    if args.plot and rows:
        from .sim.visualize import plot_history
        plot_history(rows, title=f"Fitness history ({cfg.environment_type})")

if __name__ == "__main__":
    run()
