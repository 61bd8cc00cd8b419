"""Observability module.

Provides structured logging, run correlation, PII masking and metrics.
"""

from .logging_config import configure_logging, JSONFormatter, RunIDFilter
from .correlation import run_id_var, get_run_id, generate_run_id
from .masking import mask_email, hash_email

__all__ = [
    # Logging
    "configure_logging",
    "JSONFormatter",
    "RunIDFilter",
    # Run ID
    "run_id_var",
    "get_run_id",
    "generate_run_id",
    # Masking
    "mask_email",
    "hash_email",
]
