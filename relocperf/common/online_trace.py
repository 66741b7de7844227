"""Cumulative relocalization accuracy over the course of a sequence, for evaluating online relocalization."""

import os
from dataclasses import dataclass
from typing import List, Optional

import matplotlib.pyplot as plt

import relocperf.utils.csv_utils as csv_utils
from relocperf.common.sequence_result import SequenceResult

ONLINE_CSV_HEADER = [
    "FrameIdx",
    "FramePct",
    "Reloc Success",
    "Reloc Sum",
    "Reloc Pct",
    "ICP Success",
    "ICP Sum",
    "ICP Pct",
]

UNDEFINED_RATE_STR = "nan"


@dataclass(frozen=True)
class TraceRow:
    """Running relocalization statistics, up to and including one frame.

    Cumulative rates divide the running success count by the frame index, so the rate at frame 0 is undefined
    and stored as None.
    """

    frame_idx: int
    frame_fraction: float
    reloc_success: bool
    reloc_sum: int
    reloc_rate: Optional[float]
    icp_success: bool
    icp_sum: int
    icp_rate: Optional[float]

    def as_csv_row(self) -> List[str]:
        """Values in the column order of `ONLINE_CSV_HEADER`. Booleans are written as 1/0."""
        return [
            str(self.frame_idx),
            _format_float(self.frame_fraction),
            str(int(self.reloc_success)),
            str(self.reloc_sum),
            _format_float(self.reloc_rate),
            str(int(self.icp_success)),
            str(self.icp_sum),
            _format_float(self.icp_rate),
        ]


def _format_float(value: Optional[float]) -> str:
    if value is None:
        return UNDEFINED_RATE_STR
    return f"{value:g}"


def build_trace(result: SequenceResult) -> List[TraceRow]:
    """Expand the per-frame outcomes of a sequence into running success counts and rates.

    Args:
        result: outcomes on a single sequence.

    Returns:
        one row per frame, in frame order.
    """
    trace = []
    reloc_sum = 0
    icp_sum = 0

    for frame_idx in range(result.pose_count):
        reloc_success = result.reloc_results[frame_idx]
        icp_success = result.icp_results[frame_idx]

        reloc_sum += int(reloc_success)
        icp_sum += int(icp_success)

        trace.append(
            TraceRow(
                frame_idx=frame_idx,
                frame_fraction=frame_idx / result.pose_count,
                reloc_success=reloc_success,
                reloc_sum=reloc_sum,
                reloc_rate=reloc_sum / frame_idx if frame_idx > 0 else None,
                icp_success=icp_success,
                icp_sum=icp_sum,
                icp_rate=icp_sum / frame_idx if frame_idx > 0 else None,
            )
        )

    return trace


def get_online_results_fname(reloc_tag: str, sequence_name: str, suffix: str = ".csv") -> str:
    """File name of the online evaluation output of a sequence, e.g. `{reloc_tag}_{sequence_name}.csv`."""
    return f"{reloc_tag}_{sequence_name}{suffix}"


def save_trace_csv(trace: List[TraceRow], csv_fpath: str) -> None:
    """Save a trace to a `"; "`-delimited CSV file, with a header row and one row per frame."""
    parent_dir = os.path.dirname(csv_fpath)
    if parent_dir:
        os.makedirs(parent_dir, exist_ok=True)
    csv_utils.write_csv(csv_fpath, header=ONLINE_CSV_HEADER, rows=[row.as_csv_row() for row in trace])


def plot_trace(trace: List[TraceRow], save_fpath: str, title: str = "") -> None:
    """Render the cumulative success rate of relocalization and ICP against the fraction of the sequence seen.

    Frame 0 has no defined rate and is skipped.
    """
    defined_rows = [row for row in trace if row.reloc_rate is not None]
    frame_fractions = [row.frame_fraction for row in defined_rows]

    plt.plot(frame_fractions, [row.reloc_rate for row in defined_rows], color="g", label="Reloc")
    plt.plot(frame_fractions, [row.icp_rate for row in defined_rows], color="b", label="ICP")
    plt.xlabel("Fraction of sequence")
    plt.ylabel("Cumulative success rate")
    plt.xlim(0, 1)
    plt.legend(loc="lower right")
    plt.title(title)

    parent_dir = os.path.dirname(save_fpath)
    if parent_dir:
        os.makedirs(parent_dir, exist_ok=True)
    plt.savefig(save_fpath, dpi=200)
    plt.close("all")
