"""
CDoS: Cascading DoS mitigation sweep

Main entry point of the experiment. Fixes the ns-3 RNG seed once for the
process, then runs the same topology and loads twice: once with small
(200-byte) and once with large (1500-byte) UDP payloads. The cascading DoS
attack is feasible with the large payloads and not with the small ones.

There are no command-line options; all parameters live in Config.

Usage:
    python main.py

Output:
    CDoS-6Mbps-adhoc-UDP-building/u_0=<load>rho=<load>T=<payload>/nodes_<node>_<device> (3-digit ids)
"""

from ns import ns
import random
import sys
import traceback
import numpy as np
from Config import Config
from CDoSExperiment import experiment


def seed_rngs(seed: int = Config.SEED, run: int = Config.RUN) -> None:
    """Seed ns-3, Python random and numpy; called once per process."""
    ns.RngSeedManager.SetSeed(seed)
    ns.RngSeedManager.SetRun(run)
    random.seed(seed)
    np.random.seed(seed)


def run_sweep(payload_lengths=Config.PAYLOAD_LENGTHS, output_root=None) -> int:
    """
    Run one experiment per payload length with identical topology and loads.

    A failed run is reported and the sweep moves on to the next payload.

    Returns:
        Number of failed runs
    """
    failures = 0
    for payload_length in payload_lengths:
        print(f"\n─── Experiment: payload {payload_length} bytes ───")
        try:
            experiment(Config.ENABLE_CTS_RTS, Config.NUM_NODES, Config.DURATION,
                       Config.FIRST_NODE_LOAD, Config.REST_NODE_LOAD, payload_length,
                       output_root=output_root)
        except Exception as e:
            failures += 1
            print(f"❌ Experiment with payload {payload_length} failed: {e}")
            traceback.print_exc()
    return failures


def main() -> int:
    seed_rngs()
    print("Starting cascading DoS sweep...")

    failures = run_sweep()
    if failures:
        print(f"🚨 {failures} experiment(s) failed")
        return 1
    print("✅ Sweep completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
