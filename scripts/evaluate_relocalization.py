"""Script to evaluate camera relocalization results against ground truth poses, under the 7-Scenes metric.

A relocalized pose is correct if it lies within 5 cm and 5 degrees of the ground truth pose. Accuracy is reported
per sequence and averaged over the dataset, for raw relocalization, after ICP, and after ICP + pose classification.
"""

import dataclasses
from typing import Optional

import click

from relocperf.evaluation.dataset_evaluator import run_evaluation
from relocperf.evaluation.sequence_evaluator import DEFAULT_MAX_FRAMES
from relocperf.evaluation_config import EvaluationConfig, load_evaluation_config


@click.command(help="Script to evaluate relocalized camera poses against ground truth, per 7-Scenes metric.")
@click.option(
    "--dataset_dir",
    "-d",
    type=click.Path(exists=True),
    default=None,
    help="Path to the dataset. Each sequence folder must contain `train` and `test` subfolders.",
)
@click.option(
    "--reloc_base_dir",
    "-r",
    type=click.Path(exists=True),
    default=None,
    help="Path to the folder where the relocalized poses are stored.",
)
@click.option(
    "--reloc_tag",
    "-t",
    type=str,
    default=None,
    help="Tag assigned to the experiment to evaluate. Poses are read from {reloc_base_dir}/{reloc_tag}_{sequence}.",
)
@click.option(
    "--use_validation",
    "-v",
    is_flag=True,
    default=False,
    help="Whether to use the validation sequence to evaluate the relocalizer. Also prints the weighted ICP "
    "accuracy to stdout, for use by a parameter search algorithm.",
)
@click.option(
    "--online_evaluation",
    "-o",
    is_flag=True,
    default=False,
    help="Whether to save the CSV for the evaluation of online relocalization.",
)
@click.option(
    "--online_output_dir",
    type=str,
    default=".",
    help="Directory where to save the online evaluation CSV files.",
)
@click.option(
    "--plot_online_trace",
    is_flag=True,
    default=False,
    help="Whether to also save a plot of cumulative accuracy per sequence (requires --online_evaluation).",
)
@click.option(
    "--num_processes",
    type=int,
    default=1,
    help="Number of processes to use for parallel evaluation. Each worker processes one sequence at a time.",
)
@click.option(
    "--max_frames",
    type=int,
    default=DEFAULT_MAX_FRAMES,
    help="Maximum number of frames per sequence.",
)
@click.option(
    "--skip_rotation_check",
    is_flag=True,
    default=False,
    help="Whether to skip checking that the rotation block of each pose is a valid rotation matrix.",
)
@click.option(
    "--config_fpath",
    type=click.Path(exists=True),
    default=None,
    help="Path to a YAML file with an `EvaluationConfig` node. If provided, all other options are ignored, except "
    "--dataset_dir, --reloc_base_dir and --reloc_tag, which override the corresponding config values.",
)
def run_evaluate_relocalization(
    dataset_dir: Optional[str],
    reloc_base_dir: Optional[str],
    reloc_tag: Optional[str],
    use_validation: bool,
    online_evaluation: bool,
    online_output_dir: str,
    plot_online_trace: bool,
    num_processes: int,
    max_frames: int,
    skip_rotation_check: bool,
    config_fpath: Optional[str],
) -> None:
    """Click entry point for relocalization accuracy evaluation."""
    if config_fpath is not None:
        config = load_evaluation_config(config_fpath)
        path_overrides = {"dataset_dir": dataset_dir, "reloc_base_dir": reloc_base_dir, "reloc_tag": reloc_tag}
        config = dataclasses.replace(config, **{k: v for k, v in path_overrides.items() if v is not None})
    else:
        if dataset_dir is None or reloc_base_dir is None or reloc_tag is None:
            raise click.UsageError("--dataset_dir, --reloc_base_dir and --reloc_tag are required without --config_fpath.")

        config = EvaluationConfig(
            dataset_dir=dataset_dir,
            reloc_base_dir=reloc_base_dir,
            reloc_tag=reloc_tag,
            use_validation=use_validation,
            online_evaluation=online_evaluation,
            online_output_dir=online_output_dir,
            plot_online_trace=plot_online_trace,
            num_processes=num_processes,
            max_frames=max_frames,
            validate_rotations=not skip_rotation_check,
        )

    run_evaluation(config)


if __name__ == "__main__":
    run_evaluate_relocalization()
