# ABOUTME: Data extraction from the source wiki page
# ABOUTME: Pipeline stages 1-3: fetch the page, find tier sections, extract element rows

"""
Extraction Layer: Get raw data from the wiki

This layer handles:
- Fetching the source document
- Classifying tier headings and pairing them with element tables
- Extracting element names, icon references and recipes from table rows

Data Flow: Wiki page → Tier sections → Elements in document order → core/
"""

from .base import DocumentSource, EmptyDatasetError, FetchError, ScrapeError

__all__ = [
    "DocumentSource",
    "EmptyDatasetError",
    "FetchError",
    "ScrapeError",
]
