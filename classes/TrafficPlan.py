"""
TrafficPlan: On/Off traffic and reachability probe planning

Decides, for every sender/receiver pair, how its ns-3 OnOffApplication is
driven: which ON/OFF duration distributions it uses, its data rate, and the
window in which it runs. Also plans the fire-once UDP probes that resolve
sender -> receiver addressing before any traffic flows.

Planning is pure Python; CDoSExperiment turns the plans into ns-3 helpers.

Copyright (c) 2025 CDoS Mitigation Study
Licensed under the MIT License
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional
import numpy as np
from Config import Config
from ExperimentConfig import ExperimentConfig
from NodePair import NodePair


class OnOffPolicy(Enum):
    ALWAYS_ON = "always_on"
    ALWAYS_OFF = "always_off"
    DUTY_CYCLE = "duty_cycle"


@dataclass(frozen=True)
class RandomVariableSpec:
    """
    A constant or exponential ns-3 random variable.

    Attributes:
        kind: "Constant" or "Exponential"
        value: Constant value, or mean of the exponential distribution (seconds)
    """
    kind: str
    value: float

    @classmethod
    def constant(cls, value: float) -> "RandomVariableSpec":
        return cls("Constant", float(value))

    @classmethod
    def exponential(cls, mean: float) -> "RandomVariableSpec":
        return cls("Exponential", float(mean))

    @property
    def mean(self) -> float:
        return self.value

    def to_ns_string(self) -> str:
        attr = "Constant" if self.kind == "Constant" else "Mean"
        return f"ns3::{self.kind}RandomVariable[{attr}={self.value:g}]"


@dataclass(frozen=True)
class TrafficSchedule:
    """
    Complete OnOffApplication plan for one pair.

    Attributes:
        pair: The sender/receiver pair the flow runs on
        policy: Which on/off regime the sender follows
        on_time: Distribution of ON phase durations
        off_time: Distribution of OFF phase durations
        packet_size: UDP payload in bytes
        data_rate: Sending rate while ON (bps)
        start: Application start time (s)
        stop: Application stop time (s), None to run until the simulation stops
    """
    pair: NodePair
    policy: OnOffPolicy
    on_time: RandomVariableSpec
    off_time: RandomVariableSpec
    packet_size: int
    data_rate: int
    start: float
    stop: Optional[float] = None

    @property
    def duty_cycle(self) -> float:
        """Long-run fraction of time spent ON."""
        if self.policy is OnOffPolicy.ALWAYS_ON:
            return 1.0
        if self.policy is OnOffPolicy.ALWAYS_OFF:
            return 0.0
        return self.on_time.mean / (self.on_time.mean + self.off_time.mean)

    def active_window(self, duration: float) -> float:
        """Seconds the application is installed and running within a run of `duration`."""
        end = duration if self.stop is None else min(self.stop, duration)
        return max(0.0, end - self.start)


@dataclass(frozen=True)
class ProbeSchedule:
    """Single UDP echo request sent by a pair's sender before its flow starts."""
    pair: NodePair
    start: float
    port: int = Config.PROBE_PORT
    size: int = Config.PROBE_SIZE
    interval: float = Config.PROBE_INTERVAL
    max_packets: int = 1


def pkt_time(payload_length: int) -> float:
    """Seconds to transmit `payload_length` bytes at the fixed link data rate."""
    return payload_length * 8 / Config.DATA_RATE_BPS


def off_time_mean(load: float, on_time: float) -> float:
    """Mean OFF duration giving a long-run duty cycle of `load` with constant ON phases."""
    return 1 / (load * (1 / on_time)) - on_time


def _duty_cycle_times(load: float, on_time: float):
    return (RandomVariableSpec.constant(on_time),
            RandomVariableSpec.exponential(off_time_mean(load, on_time)))


def plan_pair(config: ExperimentConfig, pair: NodePair) -> TrafficSchedule:
    on_time = pkt_time(config.payload_length)

    if not pair.distinguished:
        on_rv, off_rv = _duty_cycle_times(config.rest_node_load, on_time)
        return TrafficSchedule(
            pair=pair,
            policy=OnOffPolicy.DUTY_CYCLE,
            on_time=on_rv,
            off_time=off_rv,
            packet_size=config.payload_length,
            data_rate=Config.DATA_RATE_BPS,
            start=Config.REST_START + pair.index * Config.REST_START_STEP,
        )

    load = config.first_node_load
    if load == 1:
        policy = OnOffPolicy.ALWAYS_ON
        on_rv, off_rv = RandomVariableSpec.constant(1), RandomVariableSpec.constant(0)
    elif load == 0:
        policy = OnOffPolicy.ALWAYS_OFF
        on_rv, off_rv = RandomVariableSpec.constant(0), RandomVariableSpec.constant(1)
    else:
        policy = OnOffPolicy.DUTY_CYCLE
        on_rv, off_rv = _duty_cycle_times(load, on_time)

    return TrafficSchedule(
        pair=pair,
        policy=policy,
        on_time=on_rv,
        off_time=off_rv,
        packet_size=config.payload_length,
        data_rate=Config.DATA_RATE_BPS,
        start=Config.FIRST_START,
        stop=Config.FIRST_STOP,
    )


def plan_traffic(config: ExperimentConfig, pairs: List[NodePair]) -> List[TrafficSchedule]:
    return [plan_pair(config, pair) for pair in pairs]


def plan_probes(pairs: List[NodePair]) -> List[ProbeSchedule]:
    return [ProbeSchedule(pair=pair, start=Config.PROBE_START + pair.index * Config.PROBE_START_STEP)
            for pair in pairs]


def estimate_duty_cycle(schedule: TrafficSchedule, window: float,
                        rng: Optional[np.random.Generator] = None) -> float:
    """
    Sample the on/off process over `window` seconds and return the ON fraction.

    The process starts in the OFF state, like ns-3's OnOffApplication. Used to
    sanity-check a plan without running the simulator.

    Args:
        schedule: Plan to sample
        window: Observation window length in seconds (> 0)
        rng: numpy Generator, default_rng(Config.SEED) if omitted

    Returns:
        Fraction of the window spent ON, in [0, 1]
    """
    if window <= 0:
        raise ValueError(f"window must be > 0, got {window}")
    if schedule.policy is OnOffPolicy.ALWAYS_ON:
        return 1.0
    if schedule.policy is OnOffPolicy.ALWAYS_OFF:
        return 0.0

    rng = rng if rng is not None else np.random.default_rng(Config.SEED)
    on = schedule.on_time.value
    off_mean = schedule.off_time.value
    batch = int(np.ceil(window / (on + off_mean))) + 16

    elapsed = 0.0
    on_total = 0.0
    while elapsed < window:
        offs = rng.exponential(off_mean, size=batch)
        # absolute end time of each ON phase in this batch
        on_ends = elapsed + np.cumsum(offs + on)
        on_starts = on_ends - on
        on_total += float(np.clip(np.minimum(on_ends, window) - on_starts, 0.0, on).sum())
        elapsed = float(on_ends[-1])
    return on_total / window
