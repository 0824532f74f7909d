"""
StatsOutput: Output layout for per-device MAC statistics

Each run writes its Athstats files into its own directory under OUTPUT_ROOT,
named after the (first-node load, rest load, payload length) triple, e.g.
``CDoS-6Mbps-adhoc-UDP-building/u_0=1.00rho=0.14T=200/nodes_000_000``.

Copyright (c) 2025 CDoS Mitigation Study
Licensed under the MIT License
"""

import os
from pathlib import Path
from typing import List
from Config import Config
from ExperimentConfig import ExperimentConfig


class OutputDirectoryError(OSError):
    """Raised when a run's statistics directory cannot be prepared."""


def run_folder_name(config: ExperimentConfig) -> str:
    return (f"u_0={config.first_node_load:1.2f}"
            f"rho={config.rest_node_load:.2f}"
            f"T={config.payload_length}")


def prepare_run_dir(config: ExperimentConfig, output_root=Config.OUTPUT_ROOT) -> Path:
    """
    Create (if needed) and return the statistics directory of a run.

    Args:
        config: Experiment whose triple names the directory
        output_root: Sweep output directory

    Returns:
        Path of the run directory, existing and writable

    Raises:
        OutputDirectoryError: if the directory cannot be created or written
    """
    run_dir = Path(output_root) / run_folder_name(config)
    try:
        run_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputDirectoryError(f"Cannot create statistics directory {run_dir}: {e}") from e
    if not os.access(run_dir, os.W_OK | os.X_OK):
        raise OutputDirectoryError(f"Statistics directory {run_dir} is not writable")
    return run_dir


def stats_prefix(run_dir: Path) -> str:
    """Filename prefix handed to AthstatsHelper; it appends _<node>_<device>, zero-padded to 3 digits."""
    return str(Path(run_dir) / Config.STATS_PREFIX)


def stats_file_name(node: int, device: int = 0) -> str:
    return f"{Config.STATS_PREFIX}_{node:03d}_{device:03d}"


def list_stats_files(run_dir: Path) -> List[Path]:
    return sorted(p for p in Path(run_dir).glob(f"{Config.STATS_PREFIX}_*") if p.is_file())
