"""Pose comparison under the 7-Scenes relocalization metric.

A relocalized camera pose is considered correct if it lies within 5 cm and 5 degrees of the ground truth pose.
"""

import os
from typing import Union

import numpy as np
from scipy.spatial.transform import Rotation

import relocperf.utils.io as io_utils
from relocperf.common.exceptions import InvalidPoseError, RelocEvaluationError
from relocperf.utils.logger_utils import get_logger

logger = get_logger()

_PathLike = Union[str, "os.PathLike[str]"]

# 7-Scenes thresholds.
TRANSLATION_MAX_ERROR_M = 0.05
ROTATION_MAX_ERROR_RAD = 5.0 * np.pi / 180.0

DEFAULT_ROTATION_ATOL = 1e-3


def angular_separation(R1: np.ndarray, R2: np.ndarray) -> float:
    """Compute the angle (in radians) of the relative rotation that maps R1 to R2.

    The relative rotation is dR = R2 * R1^T, converted to angle-axis form. Only the angle is returned.

    Args:
        R1: array of shape (3,3), first rotation matrix.
        R2: array of shape (3,3), second rotation matrix.

    Returns:
        rotation angle in [0, pi]. Matrices with a positive determinant that are not exact rotations are projected
            onto the closest rotation, giving an angle with no guaranteed meaning.

    Raises:
        InvalidPoseError: if dR has a non-positive determinant (reflection or singular matrix), as it then has no
            angle-axis form.
    """
    dR = R2 @ R1.T
    if not np.linalg.det(dR) > 0:
        raise InvalidPoseError("Relative rotation has a non-positive determinant.")
    return float(Rotation.from_matrix(dR).magnitude())


def translation_error(gt_pose: np.ndarray, test_pose: np.ndarray) -> float:
    """Euclidean distance between the translation components of two 4x4 poses."""
    return float(np.linalg.norm(gt_pose[:3, 3] - test_pose[:3, 3]))


def is_within_thresholds(translation_error_m: float, rotation_error_rad: float) -> bool:
    """Check pose errors against the 7-Scenes thresholds. Both bounds are inclusive."""
    return translation_error_m <= TRANSLATION_MAX_ERROR_M and rotation_error_rad <= ROTATION_MAX_ERROR_RAD


def pose_matches(gt_pose: np.ndarray, test_pose: np.ndarray) -> bool:
    """Check whether the two poses are similar enough, according to the 7-Scenes metric.

    Args:
        gt_pose: array of shape (4,4), the ground truth camera pose.
        test_pose: array of shape (4,4), the pose to be tested.

    Returns:
        whether the tested pose is within 5 cm and 5 degrees of the ground truth.
    """
    t_err = translation_error(gt_pose, test_pose)
    R_err = angular_separation(gt_pose[:3, :3], test_pose[:3, :3])
    return is_within_thresholds(t_err, R_err)


def validate_rigid_pose(pose: np.ndarray, atol: float = DEFAULT_ROTATION_ATOL) -> None:
    """Ensure that a 4x4 matrix holds a proper rotation in its upper-left 3x3 block.

    Args:
        pose: array of shape (4,4).
        atol: absolute tolerance on orthonormality and on the determinant.

    Raises:
        InvalidPoseError: if the matrix has the wrong shape, or R^T R != I, or det(R) != +1.
    """
    if pose.shape != (4, 4):
        raise InvalidPoseError(f"Pose must be a 4x4 matrix, got shape {pose.shape}.")

    R = pose[:3, :3]
    if not np.allclose(R.T @ R, np.eye(3), atol=atol):
        raise InvalidPoseError("Rotation block of pose is not orthonormal.")

    det = np.linalg.det(R)
    if not np.isclose(det, 1.0, atol=atol):
        raise InvalidPoseError(f"Rotation block of pose has determinant {det:.4f}, expected 1.")


def pose_file_matches(gt_pose: np.ndarray, pose_fpath: _PathLike, validate_rotation: bool = True) -> bool:
    """Check whether a pose stored in a text file matches a ground truth pose, according to the 7-Scenes metric.

    Args:
        gt_pose: array of shape (4,4), the ground truth camera pose.
        pose_fpath: path to a file storing a 4x4 transformation matrix.
        validate_rotation: whether to reject candidate poses whose rotation block is not a proper rotation.

    Returns:
        whether the stored pose matches the ground truth pose. False if the file is missing or unusable, or if
            either rotation block has no angle-axis form.
    """
    if not os.path.isfile(pose_fpath):
        return False

    try:
        test_pose = io_utils.read_pose_file(pose_fpath)
        if validate_rotation:
            validate_rigid_pose(test_pose)
        return pose_matches(gt_pose, test_pose)
    except RelocEvaluationError as e:
        logger.warning("Treating candidate pose %s as failed: %s", pose_fpath, e)
        return False
