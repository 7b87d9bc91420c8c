"""Small deterministic pseudo-random generators used for sampling."""

from __future__ import annotations

import math

from .geometry import Vec3

_U32 = 0xFFFFFFFF
_U64 = 0xFFFFFFFFFFFFFFFF


class HashRandom:
    """PCG-style hash generator producing floats in [0, 1]."""

    def __init__(self, state: int = 1024) -> None:
        self.state = state & _U32

    def next_float(self) -> float:
        """Return the next value in [0, 1]."""
        state = self.state
        self.state = (self.state * 747796405 + 2891336453) & _U32
        word = (((state >> ((state >> 28) + 4)) ^ state) * 277803737) & _U32
        return ((word >> 22) ^ word) / _U32

    def random_in_unit_sphere(self) -> Vec3:
        """Return a point uniformly distributed inside the unit ball."""
        theta = 2.0 * math.pi * self.next_float()
        phi = math.acos(max(-1.0, min(1.0, 2.0 * self.next_float() - 1.0)))
        r = self.next_float() ** (1.0 / 3.0)
        return Vec3(
            r * math.sin(phi) * math.cos(theta),
            r * math.sin(phi) * math.sin(theta),
            r * math.cos(phi),
        )

    def random_in_unit_disk(self) -> Vec3:
        """Return a point uniformly distributed in the unit disk (z = 0)."""
        r = math.sqrt(self.next_float())
        theta = 2.0 * math.pi * self.next_float()
        return Vec3(r * math.cos(theta), r * math.sin(theta), 0.0)


class DRand48:
    """The classic drand48 linear congruential generator."""

    _A = 0x5DEECE66D
    _C = 0xB
    _MASK = 0xFFFFFFFFFFFF

    def __init__(self, seed: int = 0) -> None:
        self.state = seed & _U64
        for _ in range(10):
            self.next_float()

    def next_float(self) -> float:
        """Return the next value in [0, 1)."""
        self.state = (self._A * self.state + self._C) & _U64
        return (self.state & self._MASK) / (self._MASK + 1)


class Lcg:
    """32-bit LCG yielding 24-bit integers."""

    _A = 1664525
    _C = 1013904223

    def __init__(self, state: int = 0) -> None:
        self.state = state & _U32

    def next_int(self) -> int:
        """Advance and return an integer in [0, 2**24)."""
        self.state = (self._A * self.state + self._C) & _U32
        return self.state & 0x00FFFFFF

    def next_float(self) -> float:
        """Return the next value in [0, 1)."""
        return self.next_int() / 0x01000000


class Lcg2:
    """Small-modulus LCG with values in [0, 134456)."""

    def __init__(self, state: int = 0) -> None:
        self.state = state & _U32

    def next_int(self) -> int:
        """Advance and return the new state."""
        self.state = ((self.state * 8121 + 28411) & _U32) % 134456
        return self.state


def tea(val0: int, val1: int, rounds: int) -> int:
    """Tiny Encryption Algorithm hash of two 32-bit values over ``rounds`` rounds."""
    v0, v1, s0 = val0 & _U32, val1 & _U32, 0
    for _ in range(rounds):
        s0 = (s0 + 0x9E3779B9) & _U32
        v0 = (v0 + ((((v1 << 4) + 0xA341316C) ^ (v1 + s0) ^ ((v1 >> 5) + 0xC8013EA4)) & _U32)) & _U32
        v1 = (v1 + ((((v0 << 4) + 0xAD90777D) ^ (v0 + s0) ^ ((v0 >> 5) + 0x7E95761E)) & _U32)) & _U32
    return v0


def rot_seed(seed: int, frame: int) -> int:
    """Mix a frame number into a seed."""
    return (seed ^ frame) & _U32