"""
Determinism-friendly session helpers.

This package intentionally contains *small* primitives (seeded RNG, sim time and the
session record contract) that the rest of the engine builds on.
"""
