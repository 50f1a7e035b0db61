# ABOUTME: Cross-cutting utilities and shared infrastructure
# ABOUTME: Supporting services: logging, retry policy, console tables

"""
Utils Layer: Shared infrastructure and cross-cutting concerns

This layer provides:
- Logging configuration and progress tracking
- Retry policy for the source document fetch
- Rich table helpers for the CLI summary

Data Flow: Supporting services for all other layers
"""

from . import logging

__all__ = [
    "logging",
]
