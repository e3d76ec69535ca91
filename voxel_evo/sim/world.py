# voxel_evo/sim/world.py
from __future__ import annotations
from typing import List, Optional, Tuple
import math

from .models import Food, Creature
from .food import create_food
from .rng import RNG


class World:
    """
    Minimal kinematic stand-in for the physics collaborator.
    Square arena centred on the origin, side `size`; owns the food roster.
    """
    def __init__(self, size: float = 30.0, food_size: float = 1.0, food_energy: float = 50.0, substeps: int = 3):
        self.size = size
        self.half = size / 2
        self.food_size = food_size
        self.food_energy = food_energy
        self.substeps = max(1, int(substeps))
        self.food: List[Food] = []
        self._food_id = 0

    def _next_food_id(self) -> int:
        self._food_id += 1
        return self._food_id

    # --- food roster ---
    def spawn_food(self) -> Food:
        f = create_food(self._next_food_id(), self.size, self.food_size, self.food_energy)
        self.food.append(f)
        return f

    def spawn_food_near(self, anchor: Food, radius: float) -> Food:
        f = self.spawn_food()
        ang = RNG.random() * math.pi * 2
        dist = RNG.random() * radius
        f.x, f.y = self.clamp_inside(anchor.x + math.cos(ang) * dist, anchor.y + math.sin(ang) * dist)
        return f

    def remove_food(self, fid: int) -> None:
        self.food = [f for f in self.food if f.id != fid]

    def clear_food(self) -> None:
        self.food = []

    # --- creatures ---
    def place_creature(self, c: Creature) -> None:
        c.x = (RNG.random() - 0.5) * self.size * 0.8
        c.y = (RNG.random() - 0.5) * self.size * 0.8
        c.vx = c.vy = 0.0

    def integrate(self, c: Creature, fx: float, fy: float, dt: float, damping: float) -> None:
        mass = max(0.5, 5 * c.genes.size * c.genes.strength)
        c.vx *= damping
        c.vy *= damping
        h = dt / self.substeps
        for _ in range(self.substeps):
            c.vx += fx / mass * h
            c.vy += fy / mass * h
            c.x += c.vx * h
            c.y += c.vy * h
        x, y = self.clamp_inside(c.x, c.y)
        if x != c.x:
            c.vx = 0.0
        if y != c.y:
            c.vy = 0.0
        c.x, c.y = x, y

    # --- spatial helpers ---
    @staticmethod
    def dist(a: Tuple[float, float], b: Tuple[float, float]) -> float:
        return math.hypot(a[0] - b[0], a[1] - b[1])

    def clamp_inside(self, x: float, y: float) -> Tuple[float, float]:
        return min(max(x, -self.half), self.half), min(max(y, -self.half), self.half)

    def nearest_creature(self, me: Creature, others: List[Creature], radius: float) -> Optional[Creature]:
        best = None
        best_d = radius
        for o in others:
            if o.id == me.id or not o.alive:
                continue
            d = self.dist(me.pos(), o.pos())
            if d < best_d:
                best = o
                best_d = d
        return best
