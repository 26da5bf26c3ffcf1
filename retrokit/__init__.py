"""Core runtime pieces of a retro 2D game engine: trig tables, data files, INI, palettes, input, players and objects."""

__version__ = "0.1.0"