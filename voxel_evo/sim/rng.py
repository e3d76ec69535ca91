# voxel_evo/sim/rng.py
import random

class RNG:
    _rng = random.Random()

    @classmethod
    def seed(cls, s):
        cls._rng.seed(s)

    @classmethod
    def random(cls) -> float:
        return cls._rng.random()

    @classmethod
    def chance(cls, p: float) -> bool:
        return cls._rng.random() < p

    @classmethod
    def choice(cls, seq):
        return cls._rng.choice(seq)

    @classmethod
    def randrange(cls, n: int) -> int:
        return cls._rng.randrange(n)
