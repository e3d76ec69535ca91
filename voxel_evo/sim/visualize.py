# voxel_evo/sim/visualize.py
from __future__ import annotations
from typing import Dict, List, Optional
import matplotlib.pyplot as plt

def plot_history(rows: List[Dict[str, float]], title: str = "", out_path: Optional[str] = None):
    """Max / average fitness per generation from summarize_generation rows."""
    fig, ax = plt.subplots(figsize=(7, 4))
    gens = [r["generation"] for r in rows]
    ax.plot(gens, [r["max_fitness"] for r in rows], color="tab:orange", label="Max fitness")
    ax.plot(gens, [r["avg_fitness"] for r in rows], color="tab:blue", alpha=0.7, label="Avg fitness")
    ax.set_ylim(0, 1.05)
    ax.set_xlabel("Generation")
    ax.set_ylabel("Fitness")
    ax.set_title(title or "Fitness history")
    ax.legend()
    plt.tight_layout()
    if out_path:
        fig.savefig(out_path)
        plt.close(fig)
        return out_path
    plt.show()
    return None
