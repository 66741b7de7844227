"""Evaluates relocalized poses of a single sequence against ground truth poses."""

import os
from pathlib import Path
from typing import Dict, List, Union

import relocperf.common.pose_comparison as pose_comparison
import relocperf.utils.io as io_utils
from relocperf.common.exceptions import MissingGroundTruthDirectory, SequenceTooLongError
from relocperf.common.sequence_result import EvaluationStage, SequenceResult

_PathLike = Union[str, "os.PathLike[str]"]

GT_POSE_FNAME_TEMPLATE = "frame-{:06d}.pose.txt"
CANDIDATE_POSE_FNAME_TEMPLATE = "pose-{:06d}.{}.txt"

# Upper bound on the number of frames probed in a sequence directory.
DEFAULT_MAX_FRAMES = 1_000_000


def get_gt_pose_fpath(gt_dir: _PathLike, frame_idx: int) -> Path:
    """Path to the ground truth pose of a frame, e.g. `{gt_dir}/frame-000012.pose.txt`."""
    return Path(gt_dir) / GT_POSE_FNAME_TEMPLATE.format(frame_idx)


def get_candidate_pose_fpath(reloc_dir: _PathLike, frame_idx: int, stage: EvaluationStage) -> Path:
    """Path to the pose estimated at some stage for a frame, e.g. `{reloc_dir}/pose-000012.icp.txt`."""
    return Path(reloc_dir) / CANDIDATE_POSE_FNAME_TEMPLATE.format(frame_idx, stage.value)


def evaluate_sequence(
    gt_dir: _PathLike,
    reloc_dir: _PathLike,
    max_frames: int = DEFAULT_MAX_FRAMES,
    validate_rotations: bool = True,
) -> SequenceResult:
    """Process a dataset sequence, computing how well the relocalizer performed on it.

    Frames are visited in order, starting from index 0, until the first index without a ground truth pose file.
    Candidate poses that are missing or unreadable count as failed relocalizations. Without rotation validation,
    a frame whose ground truth or candidate rotation has no angle-axis form also counts as a failure.

    Args:
        gt_dir: directory storing the ground truth poses.
        reloc_dir: directory storing the relocalization results.
        max_frames: maximum number of frames a sequence may contain.
        validate_rotations: whether to check that rotation blocks of all poses are proper rotations.

    Returns:
        per-frame outcomes for the sequence.

    Raises:
        MissingGroundTruthDirectory: if there is no ground truth pose for frame 0.
        PoseFileReadError: if a ground truth pose file is malformed.
        InvalidPoseError: if a ground truth pose has an invalid rotation (only when `validate_rotations` is set).
        SequenceTooLongError: if more than `max_frames` ground truth poses are found.
    """
    if not get_gt_pose_fpath(gt_dir, 0).is_file():
        raise MissingGroundTruthDirectory(f"No ground truth poses found in {gt_dir}")

    outcomes: Dict[EvaluationStage, List[bool]] = {stage: [] for stage in EvaluationStage}

    frame_idx = 0
    while True:
        gt_fpath = get_gt_pose_fpath(gt_dir, frame_idx)

        # If the GT file is missing, this sequence is over.
        if not gt_fpath.is_file():
            break

        if frame_idx >= max_frames:
            raise SequenceTooLongError(f"Sequence in {gt_dir} has more than {max_frames} frames.")

        gt_pose = io_utils.read_pose_file(gt_fpath)
        if validate_rotations:
            pose_comparison.validate_rigid_pose(gt_pose)

        for stage in EvaluationStage:
            candidate_fpath = get_candidate_pose_fpath(reloc_dir, frame_idx, stage)
            is_valid = pose_comparison.pose_file_matches(
                gt_pose, candidate_fpath, validate_rotation=validate_rotations
            )
            outcomes[stage].append(is_valid)

        frame_idx += 1

    return SequenceResult.from_outcomes(
        reloc_results=outcomes[EvaluationStage.RELOC],
        icp_results=outcomes[EvaluationStage.ICP],
        final_results=outcomes[EvaluationStage.FINAL],
    )
