"""
GIGMASTER scenario and consequence engine.

Tracks scenario goals, decides victory or defeat, and advances the
consequence chains that drive slow-burn narrative arcs.
"""

__version__ = "0.1.0"
