"""Errors raised while evaluating relocalization results against ground truth.

Each error aborts the evaluation of a single sequence only. Missing candidate poses are not errors: they count
as failed relocalizations.
"""


class RelocEvaluationError(RuntimeError):
    """Base class for errors that prevent a sequence from being evaluated."""


class MissingGroundTruthDirectory(RelocEvaluationError):
    """No ground truth pose exists for the first frame of a sequence."""


class PoseFileReadError(RelocEvaluationError):
    """A pose file is missing, unreadable, or does not hold a 4x4 matrix."""


class InvalidPoseError(RelocEvaluationError):
    """The rotation block of a pose is not a proper rotation matrix."""


class SequenceTooLongError(RelocEvaluationError):
    """More ground truth frames were found than the configured maximum sequence length."""
