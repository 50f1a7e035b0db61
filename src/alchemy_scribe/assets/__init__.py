# ABOUTME: Icon asset handling for the dataset pipeline
# ABOUTME: Pipeline stage 6: resumable icon downloads keyed by element id

from .downloader import REDIRECT_STATUSES, IconDownloader, IconDownloadError

__all__ = [
    "REDIRECT_STATUSES",
    "IconDownloadError",
    "IconDownloader",
]
