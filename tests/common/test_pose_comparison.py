"""Unit tests on pose comparison under the 7-Scenes metric."""

from pathlib import Path

import numpy as np
import pytest
from scipy.spatial.transform import Rotation

import relocperf.common.pose_comparison as pose_comparison
import relocperf.utils.io as io_utils
from relocperf.common.exceptions import InvalidPoseError


def _rotz(theta_deg: float) -> np.ndarray:
    """3x3 rotation matrix about the z-axis."""
    return Rotation.from_euler("z", theta_deg, degrees=True).as_matrix()


def _make_pose(R: np.ndarray, t: np.ndarray) -> np.ndarray:
    pose = np.eye(4)
    pose[:3, :3] = R
    pose[:3, 3] = t
    return pose


def test_angular_separation_identical_rotations() -> None:
    """Ensure that the angular separation of a rotation with itself is zero."""
    rng = np.random.default_rng(0)
    euler_angles_deg = rng.uniform(-180, 180, size=(100, 3))
    for R in Rotation.from_euler("xyz", euler_angles_deg, degrees=True).as_matrix():
        assert np.isclose(pose_comparison.angular_separation(R, R), 0.0, atol=1e-6)


def test_angular_separation_90deg_about_z() -> None:
    """Ensure that a 90 degree rotation about z, compared to identity, yields pi/2."""
    angle = pose_comparison.angular_separation(np.eye(3), _rotz(90))
    assert np.isclose(angle, np.pi / 2, atol=1e-5)


def test_angular_separation_known_pair() -> None:
    """Ensure that the relative rotation R2 * R1^T is used, for two rotations about different axes."""
    R1 = Rotation.from_euler("x", 30, degrees=True).as_matrix()
    R2 = Rotation.from_euler("y", 40, degrees=True).as_matrix()

    expected = Rotation.from_matrix(R2 @ R1.T).magnitude()
    assert np.isclose(pose_comparison.angular_separation(R1, R2), expected)

    # composing rotations about the same axis simply subtracts the angles.
    assert np.isclose(pose_comparison.angular_separation(_rotz(10), _rotz(50)), np.deg2rad(40), atol=1e-6)


def test_angular_separation_ignores_axis() -> None:
    """Ensure that equal rotation angles about different axes give equal errors."""
    Rx = Rotation.from_euler("x", 3, degrees=True).as_matrix()
    Ry = Rotation.from_euler("y", 3, degrees=True).as_matrix()
    assert np.isclose(
        pose_comparison.angular_separation(np.eye(3), Rx), pose_comparison.angular_separation(np.eye(3), Ry)
    )


def test_is_within_thresholds_boundary_inclusive() -> None:
    """Ensure that errors exactly at 5 cm and 5 degrees are accepted."""
    assert pose_comparison.is_within_thresholds(0.05, 5 * np.pi / 180)
    assert pose_comparison.is_within_thresholds(0.0, 0.0)
    assert not pose_comparison.is_within_thresholds(0.0501, 0.0)
    assert not pose_comparison.is_within_thresholds(0.0, np.deg2rad(5.01))


def test_pose_matches_translation_at_threshold() -> None:
    """Ensure that a translation error of exactly 5 cm passes."""
    gt_pose = _make_pose(np.eye(3), np.zeros(3))
    test_pose = _make_pose(np.eye(3), np.array([0.05, 0.0, 0.0]))
    assert pose_comparison.pose_matches(gt_pose, test_pose)


def test_pose_matches_translation_over_threshold() -> None:
    """Ensure that a translation error of 5.01 cm fails, even with zero rotation error."""
    gt_pose = _make_pose(np.eye(3), np.zeros(3))
    test_pose = _make_pose(np.eye(3), np.array([0.0, 0.0501, 0.0]))
    assert not pose_comparison.pose_matches(gt_pose, test_pose)


def test_pose_matches_rotation_near_threshold() -> None:
    """Ensure that rotation errors just below 5 degrees pass, and just above fail."""
    gt_pose = _make_pose(_rotz(20), np.array([1.0, 2.0, 3.0]))

    assert pose_comparison.pose_matches(gt_pose, _make_pose(_rotz(24.9), np.array([1.0, 2.0, 3.0])))
    assert not pose_comparison.pose_matches(gt_pose, _make_pose(_rotz(25.1), np.array([1.0, 2.0, 3.0])))


def test_pose_file_matches_missing_file(tmp_path: Path) -> None:
    """Ensure that a missing candidate pose file counts as a failure, without raising."""
    assert not pose_comparison.pose_file_matches(np.eye(4), tmp_path / "pose-000000.reloc.txt")


def test_pose_file_matches_malformed_file(tmp_path: Path) -> None:
    """Ensure that an unreadable candidate pose file counts as a failure, without raising."""
    fpath = tmp_path / "pose-000000.reloc.txt"
    fpath.write_text("not a pose")
    assert not pose_comparison.pose_file_matches(np.eye(4), fpath)


def test_pose_file_matches_valid_file(tmp_path: Path) -> None:
    """Ensure that a candidate pose on disk close to the ground truth is accepted."""
    fpath = tmp_path / "pose-000000.icp.txt"
    io_utils.write_pose_file(fpath, _make_pose(_rotz(2), np.array([0.01, 0.01, 0.01])))
    assert pose_comparison.pose_file_matches(np.eye(4), fpath)


def test_pose_file_matches_invalid_rotation(tmp_path: Path) -> None:
    """Ensure that a candidate pose with a scaled rotation block is rejected only when validation is enabled."""
    fpath = tmp_path / "pose-000000.final.txt"
    io_utils.write_pose_file(fpath, _make_pose(1.01 * np.eye(3), np.zeros(3)))

    assert not pose_comparison.pose_file_matches(np.eye(4), fpath, validate_rotation=True)
    assert pose_comparison.pose_file_matches(np.eye(4), fpath, validate_rotation=False)


def test_validate_rigid_pose_accepts_rotation() -> None:
    """Ensure that a proper rigid transformation passes validation."""
    pose_comparison.validate_rigid_pose(_make_pose(_rotz(73), np.array([4.0, -1.0, 0.5])))


def test_validate_rigid_pose_rejects_reflection() -> None:
    """Ensure that an orthonormal matrix with determinant -1 is rejected."""
    with pytest.raises(InvalidPoseError):
        pose_comparison.validate_rigid_pose(_make_pose(np.diag([1.0, 1.0, -1.0]), np.zeros(3)))


def test_validate_rigid_pose_rejects_non_orthonormal() -> None:
    """Ensure that a sheared rotation block is rejected."""
    R = np.eye(3)
    R[0, 1] = 0.2
    with pytest.raises(InvalidPoseError):
        pose_comparison.validate_rigid_pose(_make_pose(R, np.zeros(3)))


def test_validate_rigid_pose_rejects_wrong_shape() -> None:
    """Ensure that a matrix which is not 4x4 is rejected."""
    with pytest.raises(InvalidPoseError):
        pose_comparison.validate_rigid_pose(np.eye(3))


def test_angular_separation_reflection() -> None:
    """Ensure that a relative rotation with negative determinant is reported as an invalid pose."""
    with pytest.raises(InvalidPoseError):
        pose_comparison.angular_separation(np.eye(3), np.diag([1.0, 1.0, -1.0]))


def test_pose_file_matches_degenerate_rotation_without_validation(tmp_path: Path) -> None:
    """Ensure that zero, reflected and singular rotation blocks count as failures when validation is disabled.

    None of these matrices has an angle-axis form, so no exception may escape the comparison.
    """
    degenerate_rotations = {
        "zero": np.zeros((3, 3)),
        "reflection": np.diag([1.0, 1.0, -1.0]),
        "singular": np.diag([1.0, 1.0, 0.0]),
    }
    for name, R in degenerate_rotations.items():
        fpath = tmp_path / f"pose-000000.{name}.txt"
        io_utils.write_pose_file(fpath, _make_pose(R, np.zeros(3)))
        assert not pose_comparison.pose_file_matches(np.eye(4), fpath, validate_rotation=False)


def test_pose_file_matches_degenerate_gt_without_validation(tmp_path: Path) -> None:
    """Ensure that a zero ground truth rotation makes the comparison fail, instead of raising."""
    fpath = tmp_path / "pose-000000.reloc.txt"
    io_utils.write_pose_file(fpath, np.eye(4))

    gt_pose = _make_pose(np.zeros((3, 3)), np.zeros(3))
    assert not pose_comparison.pose_file_matches(gt_pose, fpath, validate_rotation=False)
