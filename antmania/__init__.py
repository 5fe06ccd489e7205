"""
Ant Mania Simulation

A deterministic, headless swarm simulator over a directed graph of colonies.
Ants wander the map one random step per tick; two ants meeting in the same
colony destroy it and themselves.

Architecture: World is the source of truth. Ants, phases and output are consumers.
"""

__version__ = "0.1.0"
