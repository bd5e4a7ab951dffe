"""Reporting utilities for K-AI."""

from .artifacts import write_manifest
from .metrics import CsvSink, JsonlSink, LoggingProgress
from .plots import PlotAdapter

__all__ = ["write_manifest", "CsvSink", "JsonlSink", "LoggingProgress", "PlotAdapter"]
