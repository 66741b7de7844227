"""Evaluates a relocalization experiment on every sequence of a dataset, and reports summary statistics."""

import os
import sys
from multiprocessing import Pool
from typing import Dict, List, Optional, Tuple

import relocperf.common.aggregate_report as aggregate_report
import relocperf.common.online_trace as online_trace
import relocperf.dataset.sequence_discovery as sequence_discovery
import relocperf.evaluation.sequence_evaluator as sequence_evaluator
from relocperf.common.aggregate_report import AggregateReport
from relocperf.common.exceptions import RelocEvaluationError
from relocperf.common.sequence_result import SequenceResult
from relocperf.evaluation_config import EvaluationConfig
from relocperf.utils.logger_utils import get_logger

logger = get_logger()


def evaluate_single_sequence(
    sequence_name: str, gt_dir: str, reloc_dir: str, max_frames: int, validate_rotations: bool
) -> Optional[SequenceResult]:
    """Evaluate one sequence, returning None if it could not be evaluated.

    Errors are logged instead of raised, so that the remaining sequences of the dataset are still evaluated.
    """
    logger.info("Processing sequence %s in: %s - %s", sequence_name, gt_dir, reloc_dir)
    try:
        return sequence_evaluator.evaluate_sequence(
            gt_dir=gt_dir, reloc_dir=reloc_dir, max_frames=max_frames, validate_rotations=validate_rotations
        )
    except RelocEvaluationError as e:
        logger.error("Sequence %s has not been evaluated: %s", sequence_name, e)
        return None


def evaluate_dataset(config: EvaluationConfig) -> Tuple[List[str], Dict[str, SequenceResult]]:
    """Evaluate the relocalized poses of every sequence found in the dataset directory.

    Args:
        config: options of the evaluation run.

    Returns:
        sequence_names: names of all sequences found, sorted alphabetically.
        results: mapping from sequence name to its outcomes. Sequences that failed to be evaluated have no entry.
    """
    sequence_names = sequence_discovery.find_sequence_names(config.dataset_dir)
    logger.info("Found %d sequences in %s", len(sequence_names), config.dataset_dir)

    args = []
    for sequence_name in sequence_names:
        gt_dir = sequence_discovery.get_gt_sequence_dir(config.dataset_dir, sequence_name, config.use_validation)
        reloc_dir = sequence_discovery.get_reloc_sequence_dir(config.reloc_base_dir, config.reloc_tag, sequence_name)
        args += [(sequence_name, str(gt_dir), str(reloc_dir), config.max_frames, config.validate_rotations)]

    if config.num_processes > 1:
        with Pool(config.num_processes) as p:
            sequence_results = p.starmap(evaluate_single_sequence, args)
    else:
        sequence_results = [evaluate_single_sequence(*single_call_args) for single_call_args in args]

    results = {
        sequence_name: seq_result
        for sequence_name, seq_result in zip(sequence_names, sequence_results)
        if seq_result is not None
    }
    return sequence_names, results


def format_scalar_output(report: AggregateReport) -> str:
    """Weighted ICP accuracy as a single number, for consumption by a parameter search process."""
    value = report.weighted_icp_accuracy
    if value is None:
        return "nan"
    return f"{value:g}"


def save_online_results(config: EvaluationConfig, sequence_names: List[str], results: Dict[str, SequenceResult]) -> List[str]:
    """Save the cumulative accuracy trace of every evaluated sequence to CSV (and optionally a plot).

    Returns:
        paths to the saved CSV files.
    """
    csv_fpaths = []
    for sequence_name in sequence_names:
        seq_result = results.get(sequence_name)
        if seq_result is None:
            logger.warning("No online evaluation results saved for %s, since it was not evaluated.", sequence_name)
            continue

        trace = online_trace.build_trace(seq_result)

        csv_fname = online_trace.get_online_results_fname(config.reloc_tag, sequence_name)
        csv_fpath = os.path.join(config.online_output_dir, csv_fname)
        online_trace.save_trace_csv(trace, csv_fpath)
        csv_fpaths.append(csv_fpath)

        if config.plot_online_trace:
            plot_fname = online_trace.get_online_results_fname(config.reloc_tag, sequence_name, suffix=".jpg")
            online_trace.plot_trace(
                trace,
                save_fpath=os.path.join(config.online_output_dir, plot_fname),
                title=f"{config.reloc_tag}: {sequence_name}",
            )
    return csv_fpaths


def run_evaluation(config: EvaluationConfig) -> AggregateReport:
    """Evaluate a relocalization experiment, print the results table, and save any requested online results.

    The table is printed to stderr. When evaluating on the validation split, the weighted ICP accuracy is printed
    alone to stdout.
    """
    sequence_names, results = evaluate_dataset(config)
    report = aggregate_report.aggregate(results, sequence_names)

    table = aggregate_report.format_results_table(sequence_names, results, report)
    print(table, file=sys.stderr)

    if config.use_validation:
        print(format_scalar_output(report))

    if config.online_evaluation:
        csv_fpaths = save_online_results(config, sequence_names, results)
        logger.info("Saved %d online evaluation CSV files to %s", len(csv_fpaths), config.online_output_dir)

    return report
