"""Datasets available to SLPNet runs."""

from . import csv_generic as _csv_generic  # noqa: F401
from . import fixtures as _fixtures  # noqa: F401
from .registry import Dataset, available_datasets, get_dataset, register_dataset

__all__ = ["Dataset", "available_datasets", "get_dataset", "register_dataset"]
