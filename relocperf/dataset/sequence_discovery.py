"""Utilities for finding the sequences of a relocalization dataset, and their directories on disk.

Expected layout (e.g. 7-Scenes):
    {dataset_dir}/{sequence}/train/
    {dataset_dir}/{sequence}/test/frame-000000.pose.txt
    {dataset_dir}/{sequence}/validation/frame-000000.pose.txt   (optional)
    {reloc_base_dir}/{reloc_tag}_{sequence}/pose-000000.reloc.txt
"""

import glob
import os
from pathlib import Path
from typing import List, Union

_PathLike = Union[str, "os.PathLike[str]"]

TRAIN_FOLDER_NAME = "train"
VALIDATION_FOLDER_NAME = "validation"
TEST_FOLDER_NAME = "test"


def find_sequence_names(dataset_dir: _PathLike) -> List[str]:
    """Find the sequences stored under a dataset directory.

    Each valid sequence folder must have both a `train` and a `test` subfolder.

    Args:
        dataset_dir: path to a dataset.

    Returns:
        sequence names, sorted alphabetically.
    """
    sequence_names = []
    for dirpath in glob.glob(f"{dataset_dir}/*"):
        p = Path(dirpath)
        if (p / TRAIN_FOLDER_NAME).is_dir() and (p / TEST_FOLDER_NAME).is_dir():
            sequence_names.append(p.name)

    # glob does not ensure any ordering.
    sequence_names.sort()
    return sequence_names


def get_gt_sequence_dir(dataset_dir: _PathLike, sequence_name: str, use_validation: bool = False) -> Path:
    """Directory holding the ground truth poses to evaluate against, from either the test or validation split."""
    split_folder_name = VALIDATION_FOLDER_NAME if use_validation else TEST_FOLDER_NAME
    return Path(dataset_dir) / sequence_name / split_folder_name


def get_reloc_sequence_dir(reloc_base_dir: _PathLike, reloc_tag: str, sequence_name: str) -> Path:
    """Directory holding the relocalized poses of an experiment on a sequence."""
    return Path(reloc_base_dir) / f"{reloc_tag}_{sequence_name}"
