"""Binary classification datasets read from CSV files."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
from sklearn.preprocessing import LabelEncoder

from .registry import Dataset, register_dataset, resolve_path
from .utils import add_bias_column, standardize


def _load_csv(path: Path, target_col: str | None) -> tuple[np.ndarray, np.ndarray, str]:
    df = pd.read_csv(path)
    if df.shape[1] < 2:
        raise ValueError(f"CSV {path} needs at least one feature column and a target")
    target = target_col or str(df.columns[-1])
    if target not in df.columns:
        raise KeyError(f"Target column {target!r} not found in CSV")
    y = df.pop(target).to_numpy()
    X = df.to_numpy(dtype=np.float64)
    return X, y, target


@register_dataset("csv")
def load_csv(
    *,
    csv_path: str | Path,
    target_col: str | None = None,
    standardize_inputs: bool = False,
    bias: bool = False,
    dtype: str = "float32",
    **_: object,
) -> Dataset:
    """Load a two-class dataset; labels are encoded to ``0.0`` and ``1.0``."""

    path = resolve_path(csv_path)
    X, y_raw, target = _load_csv(path, target_col)
    encoder = LabelEncoder()
    y = encoder.fit_transform(y_raw)
    if len(encoder.classes_) != 2:
        raise ValueError(
            f"Expected exactly two classes in {target!r}, found {len(encoder.classes_)}"
        )

    normalization: dict[str, list[float]] = {}
    if standardize_inputs:
        X, mean, std = standardize(X)
        normalization = {"mean": mean.flatten().tolist(), "std": std.flatten().tolist()}
    X = X.astype(dtype)
    if bias:
        X = add_bias_column(X)

    return Dataset(
        name="csv",
        samples=X,
        outcomes=y.astype(dtype),
        provenance={
            "type": "csv",
            "path": str(path),
            "target_col": target,
            "classes": [str(c) for c in encoder.classes_.tolist()],
            "standardize_inputs": standardize_inputs,
            "normalization": normalization,
            "bias": bias,
        },
    )


__all__ = ["load_csv"]
