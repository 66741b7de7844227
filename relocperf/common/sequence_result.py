"""Stores per-frame relocalization outcomes for a single dataset sequence."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


class EvaluationStage(str, Enum):
    """Stages of the relocalization pipeline whose output poses are evaluated.

    The value of each member is the infix used in the name of the candidate pose files, e.g. `pose-000000.icp.txt`.
    """

    RELOC = "reloc"
    ICP = "icp"
    FINAL = "final"


# Column names used when reporting each stage.
STAGE_DISPLAY_NAMES = {
    EvaluationStage.RELOC: "Reloc",
    EvaluationStage.ICP: "ICP",
    EvaluationStage.FINAL: "Final",
}


@dataclass(frozen=True)
class SequenceResult:
    """Relocalization outcomes on one sequence.

    Args:
        pose_count: number of ground truth poses (frames) in the sequence.
        reloc_results: per-frame success of the raw relocalization, in frame order.
        icp_results: per-frame success after a round of ICP, in frame order.
        final_results: per-frame success after ICP and the pose classifier, in frame order.
    """

    pose_count: int
    reloc_results: Tuple[bool, ...]
    icp_results: Tuple[bool, ...]
    final_results: Tuple[bool, ...]

    def __post_init__(self) -> None:
        for stage in EvaluationStage:
            if len(self.outcomes(stage)) != self.pose_count:
                raise ValueError(f"Expected {self.pose_count} {stage.value} outcomes, got {len(self.outcomes(stage))}.")

    @classmethod
    def from_outcomes(
        cls, reloc_results: List[bool], icp_results: List[bool], final_results: List[bool]
    ) -> "SequenceResult":
        """Create a result from per-frame outcome lists, which must all have one entry per frame."""
        return cls(
            pose_count=len(reloc_results),
            reloc_results=tuple(bool(v) for v in reloc_results),
            icp_results=tuple(bool(v) for v in icp_results),
            final_results=tuple(bool(v) for v in final_results),
        )

    def outcomes(self, stage: EvaluationStage) -> Tuple[bool, ...]:
        """Per-frame outcomes of a given stage."""
        if stage == EvaluationStage.RELOC:
            return self.reloc_results
        elif stage == EvaluationStage.ICP:
            return self.icp_results
        elif stage == EvaluationStage.FINAL:
            return self.final_results
        raise ValueError(f"Unknown evaluation stage: {stage}")

    def num_valid(self, stage: EvaluationStage) -> int:
        """Number of frames successfully relocalized at a given stage."""
        return sum(self.outcomes(stage))

    @property
    def num_valid_reloc(self) -> int:
        return self.num_valid(EvaluationStage.RELOC)

    @property
    def num_valid_icp(self) -> int:
        return self.num_valid(EvaluationStage.ICP)

    @property
    def num_valid_final(self) -> int:
        return self.num_valid(EvaluationStage.FINAL)

    def accuracy(self, stage: EvaluationStage) -> Optional[float]:
        """Percentage of frames successfully relocalized at a given stage, or None for an empty sequence."""
        if self.pose_count == 0:
            return None
        return self.num_valid(stage) / self.pose_count * 100
