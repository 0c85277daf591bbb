"""HTTP explorer server for an ordinals chain index, with routing, content, text and transfer log helpers."""

__version__ = "0.1.0"