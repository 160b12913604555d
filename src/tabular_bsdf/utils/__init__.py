"""Utilities module."""

from .config import ExportConfig, SourceType

__all__ = ["ExportConfig", "SourceType"]
