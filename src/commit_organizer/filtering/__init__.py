"""Filtering of changes that must never be committed."""

from .sensitive_filter import ExcludedRecord, FilterResult, filter_sensitive  # noqa: F401
