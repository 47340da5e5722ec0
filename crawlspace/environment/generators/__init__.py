"""Level generation for crawlspace.

- LevelGenerator: main-path random walk with side branches on a room grid
- LevelSettings: validated generation parameters
"""

from .level import LevelGenerator, LevelSettings

__all__ = [
    "LevelGenerator",
    "LevelSettings",
]
