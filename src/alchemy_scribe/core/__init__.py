# ABOUTME: Domain models and dataset assembly
# ABOUTME: Pipeline stages 4-5 plus orchestration: identifiers, reverse index, catalog, pipeline

"""
Core Layer: Dataset assembly and workflow orchestration

This layer handles:
- Element, recipe and dataset models
- Canonical identifiers and the used-in reverse index
- The read-only catalog handed to the browsing UI
- Pipeline orchestration across all stages

Data Flow: extraction/ elements → Element table → Dataset → persistence/
"""

from .identifiers import normalize_identifier
from .models import (
    AssetOutcome,
    Dataset,
    DownloadStatus,
    DownloadSummary,
    Element,
    Recipe,
    ReverseIndex,
    TierSection,
)

# Import the pipeline and catalog on demand to avoid circular imports
# Use: from alchemy_scribe.core.pipeline import DatasetPipeline

__all__ = [
    "AssetOutcome",
    "Dataset",
    "DownloadStatus",
    "DownloadSummary",
    "Element",
    "Recipe",
    "ReverseIndex",
    "TierSection",
    "normalize_identifier",
]
