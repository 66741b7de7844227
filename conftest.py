"""Shared pytest fixtures for writing synthetic relocalization sequences to disk."""

from pathlib import Path
from typing import Callable, Dict, List, Optional

import numpy as np
import pytest

import relocperf.utils.io as io_utils


def make_pose(R: Optional[np.ndarray] = None, t: Optional[List[float]] = None) -> np.ndarray:
    """Build a 4x4 rigid pose from an optional rotation matrix and translation vector."""
    pose = np.eye(4)
    if R is not None:
        pose[:3, :3] = R
    if t is not None:
        pose[:3, 3] = t
    return pose


@pytest.fixture
def write_sequence_poses() -> Callable[..., None]:
    """Factory that writes ground truth and candidate poses of a sequence using the on-disk naming scheme.

    Candidate poses are given per stage name ("reloc", "icp", "final"), with None for a missing file.
    """

    def _write(
        gt_dir: Path,
        reloc_dir: Path,
        gt_poses: List[np.ndarray],
        candidate_poses: Dict[str, List[Optional[np.ndarray]]],
    ) -> None:
        for frame_idx, gt_pose in enumerate(gt_poses):
            io_utils.write_pose_file(Path(gt_dir) / f"frame-{frame_idx:06d}.pose.txt", gt_pose)

        for stage_name, poses in candidate_poses.items():
            for frame_idx, pose in enumerate(poses):
                if pose is None:
                    continue
                io_utils.write_pose_file(Path(reloc_dir) / f"pose-{frame_idx:06d}.{stage_name}.txt", pose)

    return _write
