"""Stores the options of a relocalization evaluation run."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import hydra
from hydra.utils import instantiate

from relocperf.evaluation.sequence_evaluator import DEFAULT_MAX_FRAMES

CONFIG_DIR = Path(__file__).resolve().parent / "configs"


@dataclass(frozen=True)
class EvaluationConfig:
    """Options for evaluating one relocalization experiment on a dataset.

    Attributes:
        dataset_dir: path to the dataset. Every subdirectory with `train` and `test` folders is a sequence.
        reloc_base_dir: path to the directory where relocalized poses are stored, one `{reloc_tag}_{sequence}`
            folder per sequence.
        reloc_tag: tag assigned to the experiment to evaluate.
        use_validation: whether to evaluate on the `validation` split of each sequence instead of `test`. Also
            enables printing of the weighted ICP accuracy to stdout, for parameter search.
        online_evaluation: whether to save a CSV of cumulative accuracy per sequence.
        online_output_dir: directory where online evaluation CSVs (and plots) are saved.
        plot_online_trace: whether to also save a plot of cumulative accuracy per sequence.
        num_processes: number of processes used to evaluate sequences in parallel.
        max_frames: maximum number of frames per sequence.
        validate_rotations: whether to reject poses whose rotation block is not a proper rotation.
    """

    dataset_dir: str
    reloc_base_dir: str
    reloc_tag: str
    use_validation: bool = False
    online_evaluation: bool = False
    online_output_dir: str = "."
    plot_online_trace: bool = False
    num_processes: int = 1
    max_frames: int = DEFAULT_MAX_FRAMES
    validate_rotations: bool = True


def load_evaluation_config(config_fpath: str, overrides: Optional[List[str]] = None) -> EvaluationConfig:
    """Load an evaluation config from a YAML file with an `EvaluationConfig` node.

    Args:
        config_fpath: path to YAML config file, e.g. `relocperf/configs/seven_scenes_test.yaml`.
        overrides: Hydra override strings. Fields present in the YAML file are overridden as
            "EvaluationConfig.reloc_tag=exp2". Fields left to their dataclass default are not in the composed
            config, so they must be added with "++EvaluationConfig.use_validation=true" ("++" adds or overrides).

    Returns:
        instantiated evaluation config.
    """
    config_fpath = Path(config_fpath).resolve()
    if not config_fpath.exists():
        raise ValueError(f"No config file found at {config_fpath}")

    with hydra.initialize_config_dir(config_dir=str(config_fpath.parent), version_base=None):
        cfg = hydra.compose(config_name=config_fpath.stem, overrides=overrides or [])
        config = instantiate(cfg.EvaluationConfig)

    return config
