# ABOUTME: Logging configuration, progress tracking, and output formatting
# ABOUTME: Provides rich console progress and structured logging for the pipeline

from .config import LoggingMode, configure_logging, detect_logging_mode, get_logging_status
from .progress import DownloadProgressTracker, create_download_progress
from .utils import get_logger, log_api_call, log_pipeline_step, with_pipeline_context

__all__ = [
    # Configuration
    "LoggingMode",
    "configure_logging",
    "detect_logging_mode",
    "get_logging_status",
    # Progress
    "DownloadProgressTracker",
    "create_download_progress",
    # Utilities
    "get_logger",
    "log_api_call",
    "log_pipeline_step",
    "with_pipeline_context",
]
