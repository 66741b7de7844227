"""Summary statistics of relocalization accuracy over all sequences of a dataset."""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np

from relocperf.common.sequence_result import STAGE_DISPLAY_NAMES, EvaluationStage, SequenceResult

NOT_EVALUATED_MARKER = "N/E"

NAME_COLUMN_WIDTH = 15
VALUE_COLUMN_WIDTH = 8


@dataclass(frozen=True)
class StageAccuracy:
    """Dataset-wide accuracy of one evaluation stage, as percentages.

    Args:
        avg_accuracy: mean over sequences of the per-sequence accuracy. Every sequence has equal weight.
        weighted_avg_accuracy: total number of successful frames divided by total number of frames.
    """

    avg_accuracy: Optional[float]
    weighted_avg_accuracy: Optional[float]


@dataclass(frozen=True)
class AggregateReport:
    """Accuracy of every evaluation stage, averaged over the evaluated sequences of a dataset.

    Averages are None when no frame was evaluated, rather than a fabricated 0%.
    """

    num_evaluated_sequences: int
    total_pose_count: int
    stage_accuracies: Dict[EvaluationStage, StageAccuracy]

    @property
    def weighted_icp_accuracy(self) -> Optional[float]:
        """Scalar objective for parameter search: pose-count-weighted accuracy after ICP."""
        return self.stage_accuracies[EvaluationStage.ICP].weighted_avg_accuracy


def aggregate(results: Mapping[str, SequenceResult], sequence_names: Sequence[str]) -> AggregateReport:
    """Combine per-sequence results into unweighted and pose-count-weighted averages.

    Sequences listed in `sequence_names` without an entry in `results` failed to be evaluated, and are left out
    of both averages. Sequences with zero frames are left out of the unweighted average.

    Args:
        results: mapping from sequence name to the outcomes on that sequence.
        sequence_names: names of all discovered sequences.

    Returns:
        summary statistics for each evaluation stage.
    """
    evaluated = [results[name] for name in sequence_names if name in results]
    total_pose_count = sum(r.pose_count for r in evaluated)

    stage_accuracies = {}
    for stage in EvaluationStage:
        per_sequence_acc = [r.accuracy(stage) for r in evaluated if r.pose_count > 0]
        avg_accuracy = float(np.mean(per_sequence_acc)) if len(per_sequence_acc) > 0 else None

        if total_pose_count > 0:
            num_valid = sum(r.num_valid(stage) for r in evaluated)
            weighted_avg_accuracy = num_valid / total_pose_count * 100
        else:
            weighted_avg_accuracy = None

        stage_accuracies[stage] = StageAccuracy(avg_accuracy=avg_accuracy, weighted_avg_accuracy=weighted_avg_accuracy)

    return AggregateReport(
        num_evaluated_sequences=len(evaluated),
        total_pose_count=total_pose_count,
        stage_accuracies=stage_accuracies,
    )


def _format_cell(item: Any, width: int, left_align: bool = False) -> str:
    """Format a table entry into a fixed-width cell. Floats use 2 decimals, and None is marked as not evaluated."""
    if item is None:
        text = NOT_EVALUATED_MARKER
    elif isinstance(item, float):
        text = f"{item:.2f}"
    else:
        text = str(item)
    return text.ljust(width) if left_align else text.rjust(width)


def _format_row(name: str, values: List[Any]) -> str:
    cells = [_format_cell(name, NAME_COLUMN_WIDTH, left_align=True)]
    cells += [_format_cell(v, VALUE_COLUMN_WIDTH) for v in values]
    return "".join(cells)


def format_results_table(
    sequence_names: Sequence[str], results: Mapping[str, SequenceResult], report: AggregateReport
) -> str:
    """Render a table with one row per sequence, followed by the unweighted and weighted averages.

    Sequences that were not evaluated are listed with a not-evaluated marker in place of every number.
    """
    lines = [_format_row("Sequence", ["Poses"] + [STAGE_DISPLAY_NAMES[stage] for stage in EvaluationStage])]

    for name in sequence_names:
        seq_result = results.get(name)
        if seq_result is None:
            lines.append(_format_row(name, [None] * (1 + len(EvaluationStage))))
            continue
        lines.append(_format_row(name, [seq_result.pose_count] + [seq_result.accuracy(s) for s in EvaluationStage]))

    lines.append("")
    lines.append(
        _format_row(
            "Average",
            [report.num_evaluated_sequences] + [report.stage_accuracies[s].avg_accuracy for s in EvaluationStage],
        )
    )
    lines.append(
        _format_row(
            "Average (W)",
            [report.total_pose_count] + [report.stage_accuracies[s].weighted_avg_accuracy for s in EvaluationStage],
        )
    )
    return "\n".join(lines) + "\n"
