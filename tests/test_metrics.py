import csv

import numpy as np
import pandas as pd
import pytest

from voxel_evo.analyze import clean_overall, latest_session_id, plot_overall
from voxel_evo.main import build_parser, config_from_args, run_headless
from voxel_evo.sim import behaviors
from voxel_evo.sim.config import SimulationConfig
from voxel_evo.sim.genes import Genome
from voxel_evo.sim.metrics import append_csv, format_summary, summarize_generation
from voxel_evo.sim.models import Creature
from voxel_evo.sim.population import Simulation
from voxel_evo.sim.visualize import plot_history
from voxel_evo.ui.csv_writer import GenerationCsvLogger
from voxel_evo.ui.recorder import Recorder, TRAIT_COLUMNS


def _make_pop():
    a = Creature(id=0, generation=1, genes=Genome(speed=0.2), species_id=0)
    b = Creature(id=1, generation=1, genes=Genome(speed=0.8), species_id=1)
    a.fitness, b.fitness = 0.4, 0.6
    return [a, b]


def test_summarize_generation():
    row = summarize_generation(3, _make_pop(), "forest", food_count=7)
    assert row["generation"] == 3
    assert row["n"] == 2
    assert row["species"] == 2
    assert row["max_fitness"] == pytest.approx(0.6)
    assert row["avg_fitness"] == pytest.approx(0.5)
    assert row["avg_speed"] == pytest.approx(0.5)
    assert row["food"] == 7
    assert "Gen   3" in format_summary(row)


def test_summarize_empty_generation():
    row = summarize_generation(0, [])
    assert row["n"] == 0
    assert row["max_fitness"] == 0.0


def test_append_csv_writes_header_once(tmp_path):
    path = tmp_path / "runs" / "gen.csv"
    append_csv(str(path), summarize_generation(1, _make_pop()))
    append_csv(str(path), summarize_generation(2, _make_pop()))
    with open(path, newline="") as f:
        rows = list(csv.DictReader(f))
    assert [r["generation"] for r in rows] == ["1", "2"]


def test_generation_logger_and_analysis(tmp_path):
    overall = tmp_path / "ui_generations.csv"
    species = tmp_path / "ui_species_generations.csv"
    logger = GenerationCsvLogger(str(overall), str(species))
    logger.append_generation(1, _make_pop(), "plains")
    logger.append_generation(2, _make_pop(), "forest")

    df = pd.read_csv(overall, dtype={"session_id": str})
    assert list(df["generation"]) == [1, 2]
    assert df["fitness_max"].iloc[0] == pytest.approx(0.6)
    assert latest_session_id(df) == logger.session_id
    assert len(pd.read_csv(species)) == 4

    cleaned = clean_overall(df)
    assert list(cleaned["generation"]) == [1, 2]
    png = plot_overall(df, str(tmp_path / "reports"), "test")
    assert (tmp_path / "reports").exists() and png.endswith(".png")


def test_recorder_saves_padded_snapshots(tmp_path):
    sim = Simulation(SimulationConfig(seed=5, population_size=4))
    sim.init_simulation()
    sim.start()
    rec = Recorder(enabled=True, stride_steps=1, world_size=sim.config.world_size)
    for _ in range(3):
        sim.tick()
        rec.maybe_capture(sim)
    out = rec.save_npz(str(tmp_path / "run.npz"))
    data = np.load(out)
    assert data["pos"].shape[0] == 3
    assert data["traits"].shape[2] == len(TRAIT_COLUMNS)
    assert len(data["generation"]) == 3


def test_recorder_without_frames_saves_nothing(tmp_path):
    assert Recorder(enabled=True).save_npz(str(tmp_path / "x.npz")) is None


def test_cli_arguments_build_config():
    args = build_parser().parse_args(["--pop", "7", "--env", "desert", "--seasonal", "--seed", "3"])
    cfg = config_from_args(args)
    assert cfg.population_size == 7
    assert cfg.environment_type == "desert"
    assert cfg.seasonal_changes is True
    assert cfg.seed == 3


def test_headless_run_collects_one_row_per_generation(tmp_path, monkeypatch):
    # three creatures sit at the survivor threshold, so every tick ends a generation
    monkeypatch.setattr(behaviors, "find_mate", lambda *args: None)
    path = tmp_path / "gens.csv"
    rows = run_headless(SimulationConfig(seed=9, population_size=3), 4, 100, str(path))
    assert [r["generation"] for r in rows] == [1, 2, 3, 4]
    assert len(pd.read_csv(path)) == 4


def test_headless_run_stops_at_tick_budget():
    rows = run_headless(SimulationConfig(seed=9), 5, 10)
    assert rows == []


def test_plot_history_writes_png(tmp_path):
    rows = [summarize_generation(g, _make_pop()) for g in (1, 2, 3)]
    out = plot_history(rows, out_path=str(tmp_path / "fit.png"))
    assert (tmp_path / "fit.png").exists()
    assert out.endswith("fit.png")
