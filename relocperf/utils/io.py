"""File I/O utilities for rigid poses stored as plain text."""

import os
from pathlib import Path
from typing import Union

import numpy as np

from relocperf.common.exceptions import PoseFileReadError

_PathLike = Union[str, "os.PathLike[str]"]

NUM_POSE_ENTRIES = 16


def read_pose_file(fpath: _PathLike) -> np.ndarray:
    """Load a rigid pose from a text file.

    The file holds 16 whitespace-separated numbers, the 4x4 matrix in row-major order, e.g. the `*.pose.txt`
    files of the 7-Scenes dataset.

    Args:
        fpath: Path to pose file.

    Returns:
        array of shape (4,4) representing the pose.

    Raises:
        PoseFileReadError: if the file is missing, unreadable, or does not contain exactly 16 finite numbers.
    """
    if not Path(fpath).is_file():
        raise PoseFileReadError(f"No pose file found at {fpath}")

    try:
        with open(fpath, "r") as f:
            values = [float(v) for v in f.read().split()]
    except (OSError, ValueError) as e:
        raise PoseFileReadError(f"Could not parse pose file {fpath}: {e}") from e

    if len(values) != NUM_POSE_ENTRIES:
        raise PoseFileReadError(f"Expected {NUM_POSE_ENTRIES} values in {fpath}, found {len(values)}.")

    pose = np.array(values, dtype=np.float64).reshape(4, 4)
    if not np.isfinite(pose).all():
        raise PoseFileReadError(f"Pose file {fpath} contains non-finite values.")
    return pose


def write_pose_file(fpath: _PathLike, pose: np.ndarray) -> None:
    """Save a 4x4 rigid pose to a text file, one matrix row per line.

    Args:
        fpath: Path to file to create. Parent directories are created if needed.
        pose: array of shape (4,4).
    """
    pose = np.asarray(pose, dtype=np.float64)
    if pose.shape != (4, 4):
        raise ValueError(f"Pose must be a 4x4 matrix, got shape {pose.shape}.")

    parent_dir = os.path.dirname(os.fspath(fpath))
    if parent_dir:
        os.makedirs(parent_dir, exist_ok=True)

    with open(fpath, "w") as f:
        for row in pose:
            f.write(" ".join(repr(float(v)) for v in row) + "\n")
