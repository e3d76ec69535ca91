#!/usr/bin/env python3
"""
Analyze UI CSVs produced by GenerationCsvLogger.

  - --session latest|<id> filters to a single run (runs/ never needs cleaning)
  - Saves timestamped CSV exports and PNG plots under --outdir
  - Overall plot:
      (1) population N + number of living species
      (2) fitness median with q25..q75 band and max
      (3) avg speed, size, sense and adaptability
  - Species plots (one PNG per species): N, avg fitness, avg speed & size

Usage:
  python -m voxel_evo.analyze --overall runs/ui_generations.csv \
                              --species runs/ui_species_generations.csv \
                              --outdir reports --tag demo --session latest
"""
from __future__ import annotations
import argparse
import os
import sys
import time
from typing import Optional
import pandas as pd

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

OVERALL_NUMERIC = ("generation", "n", "species",
                   "fitness_min", "fitness_q25", "fitness_median", "fitness_q75", "fitness_max",
                   "avg_speed", "avg_size", "avg_sense", "avg_metabolism", "avg_adaptability")
SPECIES_NUMERIC = ("generation", "species_id", "n", "avg_fitness", "avg_speed", "avg_size", "avg_sense", "avg_color")


# ------------------------- utilities -------------------------
def ensure_dir(p: str) -> None:
    os.makedirs(p, exist_ok=True)

def timestamp(tag: Optional[str] = None) -> str:
    t = time.strftime("%Y%m%d_%H%M%S")
    return f"{t}__{tag}" if tag else t

def exists(path: Optional[str]) -> bool:
    return bool(path and os.path.exists(path))

def _numeric(df: pd.DataFrame, cols) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
    return df


# ------------------------- loading ---------------------------
def load_csvs(overall_path: str, species_path: Optional[str]):
    if not exists(overall_path):
        print(
            "\n[ERROR] Overall CSV not found.\n"
            f"  Expected: {overall_path}\n"
            "Hints:\n"
            "  • Run the UI until at least one generation completes.\n"
            "  • Confirm the logger paths in voxel_evo/ui/app.py match these args.\n",
            file=sys.stderr
        )
        sys.exit(1)

    # hex session ids can look numeric
    df_overall = pd.read_csv(overall_path, dtype={"session_id": str})
    df_species = (pd.read_csv(species_path, dtype={"session_id": str})
                  if (species_path and exists(species_path)) else None)
    return df_overall, df_species


def latest_session_id(df: pd.DataFrame) -> Optional[str]:
    """Last session_id in file order (used by --session latest)."""
    if "session_id" not in df.columns or len(df) == 0:
        return None
    s = df["session_id"].dropna()
    return s.iloc[-1] if len(s) else None


def filter_session(df: Optional[pd.DataFrame], sid: str) -> Optional[pd.DataFrame]:
    if df is None or "session_id" not in df.columns:
        return df
    return df[df["session_id"] == sid].copy()


# ------------------------- cleaning --------------------------
def clean_overall(df_overall: pd.DataFrame) -> pd.DataFrame:
    """Numeric columns averaged per generation (across sessions when several are present)."""
    df = _numeric(df_overall.copy(), OVERALL_NUMERIC)
    if "generation" not in df.columns:
        return df
    keep = [c for c in OVERALL_NUMERIC if c in df.columns and c != "generation"]
    return df.groupby("generation", as_index=False)[keep].mean().sort_values("generation")


def clean_species(df_species: Optional[pd.DataFrame]) -> pd.DataFrame:
    if df_species is None or len(df_species) == 0:
        return pd.DataFrame()
    df = _numeric(df_species.copy(), SPECIES_NUMERIC)
    keep = [c for c in SPECIES_NUMERIC if c in df.columns and c not in ("generation", "species_id")]
    keys = [k for k in ("species_id", "generation") if k in df.columns]
    return df.groupby(keys, as_index=False)[keep].mean().sort_values(keys)


# ------------------------- plotting --------------------------
def plot_overall(df_overall: pd.DataFrame, outdir: str, tag: Optional[str]) -> str:
    ensure_dir(outdir)
    g = clean_overall(df_overall)
    fig, ax = plt.subplots(3, 1, figsize=(10, 11), sharex=True)

    # (1) N + species
    if "n" in g.columns:
        ax[0].plot(g["generation"], g["n"], label="Population", color="black", linewidth=2.25)
    if "species" in g.columns:
        ax[0].plot(g["generation"], g["species"], label="Living species", color="tab:green")
    ax[0].set_ylabel("Count")
    ax[0].legend(loc="best")
    ax[0].grid(alpha=0.25)

    # (2) fitness spread
    if {"fitness_q25", "fitness_q75"} <= set(g.columns):
        ax[1].fill_between(g["generation"], g["fitness_q25"], g["fitness_q75"],
                           color="tab:blue", alpha=0.2, label="q25..q75")
    if "fitness_median" in g.columns:
        ax[1].plot(g["generation"], g["fitness_median"], color="tab:blue", label="Median")
    if "fitness_max" in g.columns:
        ax[1].plot(g["generation"], g["fitness_max"], color="tab:orange", label="Max")
    ax[1].set_ylabel("Fitness")
    ax[1].set_ylim(0, 1.05)
    ax[1].legend(loc="best")
    ax[1].grid(alpha=0.25)

    # (3) traits
    for col, label in (("avg_speed", "Avg speed"), ("avg_size", "Avg size"),
                       ("avg_sense", "Avg sense"), ("avg_adaptability", "Avg adaptability")):
        if col in g.columns:
            ax[2].plot(g["generation"], g[col], label=label)
    ax[2].set_xlabel("Generation")
    ax[2].set_ylabel("Trait value")
    ax[2].legend(loc="best")
    ax[2].grid(alpha=0.25)

    fig.tight_layout()
    png = os.path.join(outdir, f"overall_trends_{timestamp(tag)}.png")
    fig.savefig(png, dpi=160)
    plt.close(fig)
    print(f"[OK] Saved {png}")
    return png


def plot_species(df_species: Optional[pd.DataFrame], outdir: str, tag: Optional[str]):
    d = clean_species(df_species)
    if len(d) == 0 or "species_id" not in d.columns:
        print("[INFO] No species rows; skipping per-species plots.")
        return []

    ensure_dir(outdir)
    written = []
    for key, sub in d.groupby("species_id"):
        fig, ax = plt.subplots(3, 1, figsize=(10, 11), sharex=True)
        ax[0].plot(sub["generation"], sub["n"], label="N", linewidth=2.0)
        ax[0].set_ylabel("Count")
        ax[0].grid(alpha=0.25)

        if "avg_fitness" in sub.columns:
            ax[1].plot(sub["generation"], sub["avg_fitness"], color="tab:orange", label="Avg fitness")
        ax[1].set_ylabel("Fitness")
        ax[1].grid(alpha=0.25)

        for col, label in (("avg_speed", "Speed"), ("avg_size", "Size")):
            if col in sub.columns:
                ax[2].plot(sub["generation"], sub[col], label=label)
        ax[2].legend(loc="best")
        ax[2].set_xlabel("Generation")
        ax[2].set_ylabel("Trait value")
        ax[2].grid(alpha=0.25)

        fig.suptitle(f"Species {int(key)}")
        fig.tight_layout()
        png = os.path.join(outdir, f"species_{int(key)}_trends_{timestamp(tag)}.png")
        fig.savefig(png, dpi=160)
        plt.close(fig)
        print(f"[OK] Saved {png}")
        written.append(png)
    return written


# ------------------------- exports ---------------------------
def export_csv(df: pd.DataFrame, outdir: str, base: str, tag: Optional[str]) -> str:
    ensure_dir(outdir)
    path = os.path.join(outdir, f"{base}_{timestamp(tag)}.csv")
    df.to_csv(path, index=False)
    print(f"[OK] Wrote {path}")
    return path


# ------------------------- main ------------------------------
def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--overall", type=str, default="runs/ui_generations.csv",
                    help="Path to the per-generation CSV written by the UI")
    ap.add_argument("--species", type=str, default="runs/ui_species_generations.csv",
                    help="Path to the per-species CSV (pass '' to disable)")
    ap.add_argument("--outdir", type=str, default="reports")
    ap.add_argument("--tag", type=str, default="",
                    help="Optional label appended to filenames")
    ap.add_argument("--session", type=str, default="",
                    help="Session ID to analyze; 'latest' picks the most recent one")
    args = ap.parse_args(argv)

    df_overall, df_species = load_csvs(args.overall, args.species or None)

    if args.session:
        sid = latest_session_id(df_overall) if args.session == "latest" else args.session
        if sid:
            df_overall = filter_session(df_overall, sid)
            df_species = filter_session(df_species, sid)
            print(f"[OK] Filtering analysis to session_id={sid}")
        else:
            print("[WARN] Could not resolve latest session_id; analyzing all data.")

    print(f"[INFO] Overall rows after filter: {len(df_overall)}")
    tag = args.tag or None
    export_csv(clean_overall(df_overall), args.outdir, base="overall_summary", tag=tag)
    species_clean = clean_species(df_species)
    if len(species_clean) > 0:
        export_csv(species_clean, args.outdir, base="species_summary", tag=tag)

    plot_overall(df_overall, args.outdir, tag)
    plot_species(df_species, args.outdir, tag)
    print(f"\nDone. Outputs are in: {args.outdir}")

if __name__ == "__main__":
    main()
