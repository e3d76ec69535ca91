# voxel_evo/ui/recorder.py
from __future__ import annotations
import os, time
from typing import Optional
import numpy as np

# per-creature columns stored in `traits`
TRAIT_COLUMNS = ("speed", "strength", "size", "health", "color", "behavior", "sense_range", "adaptability")

class Recorder:
    """
    Capture snapshots every `stride_steps` ticks for offline playback (NPZ).
    Stores: pos, traits, species, alive, energy, generation, food positions.
    """
    def __init__(self, enabled=False, stride_steps=2, world_size=30.0, dt=1.0 / 60.0):
        self.enabled = enabled
        self.stride_steps = max(1, int(stride_steps))
        self.world_size = float(world_size)
        self.dt = float(dt)
        self._tstep = 0
        self.pos_list = []
        self.traits_list = []
        self.species_list = []
        self.alive_list = []
        self.energy_list = []
        self.generation_list = []
        self.food_xy_list = []
        self.maxN = 0
        self.maxF = 0

    def toggle(self): self.enabled = not self.enabled; print(f"[Recorder] {'ON' if self.enabled else 'OFF'}")
    def clear(self):
        self._tstep = 0
        self.pos_list.clear(); self.traits_list.clear(); self.species_list.clear()
        self.alive_list.clear(); self.energy_list.clear()
        self.generation_list.clear(); self.food_xy_list.clear()
        self.maxN = self.maxF = 0
        print("[Recorder] cleared")

    def maybe_capture(self, sim):
        if not self.enabled: return
        self._tstep += 1
        if (self._tstep % self.stride_steps) != 0: return

        pop = sim.creatures
        N = len(pop); self.maxN = max(self.maxN, N)
        pos = np.zeros((N, 2), np.float32)
        tr = np.zeros((N, len(TRAIT_COLUMNS)), np.float32)
        sp = np.full((N,), -1, np.int32)
        alive = np.zeros((N,), np.bool_)
        energy = np.zeros((N,), np.float32)

        for i, c in enumerate(pop):
            pos[i] = (c.x, c.y)
            tr[i] = [getattr(c.genes, name) for name in TRAIT_COLUMNS]
            if c.species_id is not None:
                sp[i] = c.species_id
            alive[i] = c.alive
            energy[i] = c.energy

        self.pos_list.append(pos); self.traits_list.append(tr); self.species_list.append(sp)
        self.alive_list.append(alive); self.energy_list.append(energy)
        self.generation_list.append(sim.current_generation)

        fxy = np.array([f.pos() for f in sim.foods], np.float32).reshape(-1, 2)
        self.food_xy_list.append(fxy)
        self.maxF = max(self.maxF, len(fxy))

    def save_npz(self, out_path: Optional[str] = None):
        if not self.pos_list:
            print("[Recorder] nothing to save"); return None

        T = len(self.pos_list); maxN = self.maxN; maxF = self.maxF
        pos = np.full((T, maxN, 2), np.nan, np.float32)
        tr = np.full((T, maxN, len(TRAIT_COLUMNS)), np.nan, np.float32)
        sp = np.full((T, maxN), -1, np.int32)
        alive = np.zeros((T, maxN), np.bool_)
        energy = np.full((T, maxN), np.nan, np.float32)
        fxy = np.full((T, maxF, 2), np.nan, np.float32)
        fcnt = np.zeros((T,), np.int32)

        for t in range(T):
            N = self.pos_list[t].shape[0]
            pos[t, :N] = self.pos_list[t]
            tr[t, :N] = self.traits_list[t]
            sp[t, :N] = self.species_list[t]
            alive[t, :N] = self.alive_list[t]
            energy[t, :N] = self.energy_list[t]
            F = self.food_xy_list[t].shape[0]
            fcnt[t] = F
            if F: fxy[t, :F] = self.food_xy_list[t]

        if out_path is None:
            os.makedirs("recordings", exist_ok=True)
            stamp = time.strftime("%Y%m%d_%H%M%S")
            out_path = os.path.join("recordings", f"voxel_run_{stamp}.npz")

        np.savez_compressed(
            out_path,
            world_size=np.float32(self.world_size),
            dt=np.float32(self.dt),
            stride_steps=np.int32(self.stride_steps),
            trait_columns=np.array(TRAIT_COLUMNS),
            pos=pos, traits=tr, species=sp,
            alive=alive, energy=energy,
            generation=np.array(self.generation_list, np.int32),
            food_xy=fxy, food_count=fcnt,
        )
        print(f"[Recorder] saved: {out_path} (T={T}, maxN={maxN})")
        return out_path
