"""
CDoS Validation Test Script

This script runs a quick validation test with a shortened scenario to verify:
- Topology, device and application setup on the installed ns-3
- Athstats output (one statistics file per device)
- The late saturating sender actually transmits (its window is moved
  inside the short run)
- Simulator teardown between back-to-back runs

Used for pre-flight checks before the full 203-second sweep.

Copyright (c) 2025 CDoS Mitigation Study
"""

import tempfile
from pathlib import Path
from Config import Config
from CDoSExperiment import experiment
from NodePair import distinguished_index
from main import seed_rngs
from StatsOutput import stats_file_name


def validate_simulation(output_root):
    """
    Run short 4-node experiments with the distinguished pair's window at 4-7 s.

    Both payload lengths run with a saturating distinguished sender, plus a
    1500-byte baseline where that sender stays silent.

    Returns:
        True if every run stopped at the requested time, wrote one statistics
        file per device, and the saturating sender's statistics differ from
        the silent baseline, False otherwise
    """
    print("🧪 RUNNING VALIDATION TEST")

    Config.PROGRESS_INTERVAL = 2.0
    Config.FIRST_START, Config.FIRST_STOP = 4.0, 7.0
    node_count = 4
    duration = 8.0
    seed_rngs(42)

    sender_file = stats_file_name(2 * distinguished_index(node_count))
    ok = True
    sender_stats = {}
    for first_load, payload_length in ((1.0, 200), (1.0, 1500), (0.0, 1500)):
        result = experiment(False, node_count, duration, first_load, 0.14, payload_length,
                             output_root=output_root)
        print(f"✅ Validation Results (u_0={first_load}, payload {payload_length}):")
        print(f"   Simulation end:   {result.sim_end}s")
        print(f"   Stats files:      {len(result.stats_files)}")
        ok = ok and result.sim_end == duration and len(result.stats_files) == node_count
        sender_stats[(first_load, payload_length)] = (Path(result.run_dir) / sender_file).read_text()

    saturating_differs = sender_stats[(1.0, 1500)] != sender_stats[(0.0, 1500)]
    print(f"   Saturating sender active: {saturating_differs}")
    return ok and saturating_differs


if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp:
        success = validate_simulation(tmp)
    if success:
        print("🎉 VALIDATION PASSED - Ready for the full sweep!")
    else:
        print("🚨 VALIDATION FAILED - Check the ns-3 installation")
