# ABOUTME: Persistence layer for the dataset artifact
# ABOUTME: Pipeline stage 7 output: one JSON file regenerated wholesale on every run

"""
Persistence Layer: Write and read the dataset artifact

The artifact is never updated in place. Each run renders a complete new
snapshot and swaps it in; readers load it back through ``load_dataset``.
"""

from .serializer import load_dataset, render_dataset, write_dataset

__all__ = [
    "load_dataset",
    "render_dataset",
    "write_dataset",
]
