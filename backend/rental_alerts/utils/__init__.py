"""Shared helpers."""
from .db_utils import retry_on_lock
from .timeutils import utcnow, whole_days

__all__ = ["retry_on_lock", "utcnow", "whole_days"]
