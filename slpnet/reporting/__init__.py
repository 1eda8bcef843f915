"""Reporting utilities for SLPNet runs."""

from .artifacts import describe_training_set, write_manifest
from .metrics import CsvSink, JsonlSink
from .plots import PlotAdapter
from .summary import summarise, write_summary

__all__ = [
    "CsvSink",
    "JsonlSink",
    "PlotAdapter",
    "describe_training_set",
    "summarise",
    "write_manifest",
    "write_summary",
]
