import numpy as np
import pytest

from Config import Config
from ExperimentConfig import ExperimentConfig
from NodePair import build_pairs
from TrafficPlan import (
    OnOffPolicy,
    RandomVariableSpec,
    estimate_duty_cycle,
    off_time_mean,
    pkt_time,
    plan_probes,
    plan_traffic,
)


def plan(first_node_load=1.0, rest_node_load=0.14, payload_length=200, node_count=6):
    config = ExperimentConfig(enable_cts_rts=False, node_count=node_count, duration=203,
                              first_node_load=first_node_load, rest_node_load=rest_node_load,
                              payload_length=payload_length)
    return plan_traffic(config, build_pairs(node_count))


def test_pkt_time_at_six_mbps():
    assert pkt_time(1500) == pytest.approx(0.002)
    assert pkt_time(200) == pytest.approx(200 * 8 / 6e6)


@pytest.mark.parametrize("payload", [100, 200, 750, 1130])
def test_pkt_time_scales_linearly(payload):
    assert pkt_time(2 * payload) == pytest.approx(2 * pkt_time(payload))


def test_saturating_first_pair_is_always_on():
    first = plan(first_node_load=1.0)[-1]
    assert first.pair.distinguished
    assert first.policy is OnOffPolicy.ALWAYS_ON
    assert first.on_time == RandomVariableSpec.constant(1)
    assert first.off_time == RandomVariableSpec.constant(0)
    assert first.duty_cycle == 1.0


def test_silent_first_pair_is_always_off():
    first = plan(first_node_load=0.0)[-1]
    assert first.policy is OnOffPolicy.ALWAYS_OFF
    assert first.on_time == RandomVariableSpec.constant(0)
    assert first.off_time == RandomVariableSpec.constant(1)
    assert first.duty_cycle == 0.0


def test_fractional_first_pair_uses_own_load():
    first = plan(first_node_load=0.5, payload_length=1500)[-1]
    assert first.policy is OnOffPolicy.DUTY_CYCLE
    assert first.on_time.kind == "Constant"
    assert first.on_time.value == pytest.approx(0.002)
    assert first.off_time.kind == "Exponential"
    assert first.off_time.value == pytest.approx(0.002)
    assert first.duty_cycle == pytest.approx(0.5)


def test_first_pair_window_is_late_and_bounded():
    first = plan()[-1]
    assert (first.start, first.stop) == (Config.FIRST_START, Config.FIRST_STOP)
    assert first.active_window(203) == pytest.approx(100.0)
    assert first.active_window(10) == 0.0


def test_rest_pairs_use_rest_load_and_staggered_starts():
    rest = plan(rest_node_load=0.14, payload_length=1500)[:-1]
    assert [s.pair.index for s in rest] == [0, 1]
    assert [s.start for s in rest] == [pytest.approx(3.1), pytest.approx(3.11)]
    for schedule in rest:
        assert schedule.policy is OnOffPolicy.DUTY_CYCLE
        assert schedule.stop is None
        assert schedule.duty_cycle == pytest.approx(0.14)
        assert schedule.off_time.value == pytest.approx(off_time_mean(0.14, 0.002))
        assert schedule.active_window(203) == pytest.approx(203 - schedule.start)


def test_rest_pairs_start_before_first_pair():
    schedules = plan(node_count=10)
    first = schedules[-1]
    assert all(s.start < first.start for s in schedules[:-1])


def test_every_schedule_sends_at_link_rate_with_payload():
    for schedule in plan(payload_length=1500):
        assert schedule.data_rate == 6000000
        assert schedule.packet_size == 1500


def test_ns_random_variable_strings():
    assert RandomVariableSpec.constant(1).to_ns_string() == "ns3::ConstantRandomVariable[Constant=1]"
    assert RandomVariableSpec.constant(0).to_ns_string() == "ns3::ConstantRandomVariable[Constant=0]"
    on = RandomVariableSpec.constant(pkt_time(200))
    assert on.to_ns_string() == "ns3::ConstantRandomVariable[Constant=0.000266667]"
    off = RandomVariableSpec.exponential(0.25)
    assert off.to_ns_string() == "ns3::ExponentialRandomVariable[Mean=0.25]"


def test_probes_fire_once_at_distinct_times_before_traffic():
    pairs = build_pairs(6)
    probes = plan_probes(pairs)
    starts = [p.start for p in probes]
    assert starts == [pytest.approx(0.001), pytest.approx(0.002), pytest.approx(0.003)]
    assert len(set(starts)) == len(starts)
    assert max(starts) < Config.REST_START
    for probe, pair in zip(probes, pairs):
        assert probe.pair == pair
        assert probe.max_packets == 1
        assert probe.interval > 203
        assert probe.size == 10
        assert probe.port == Config.PROBE_PORT


def test_estimated_duty_cycle_for_fixed_policies(rng):
    on, off = plan(first_node_load=1.0)[-1], plan(first_node_load=0.0)[-1]
    assert estimate_duty_cycle(on, 100.0, rng) == 1.0
    assert estimate_duty_cycle(off, 100.0, rng) == 0.0


@pytest.mark.parametrize("load", [0.14, 0.3, 0.7])
def test_estimated_duty_cycle_converges_to_load(load, rng):
    first = plan(first_node_load=load, payload_length=1500)[-1]
    assert estimate_duty_cycle(first, 500.0, rng) == pytest.approx(load, abs=0.01)


def test_estimate_error_shrinks_with_window():
    schedule = plan(rest_node_load=0.3, payload_length=1500)[0]

    def mean_error(window):
        errors = [abs(estimate_duty_cycle(schedule, window, np.random.default_rng(seed)) - 0.3)
                  for seed in range(20)]
        return sum(errors) / len(errors)

    assert mean_error(200.0) < mean_error(0.5)


def test_estimate_rejects_empty_window(rng):
    with pytest.raises(ValueError):
        estimate_duty_cycle(plan()[0], 0.0, rng)


def test_estimate_without_rng_is_seeded_and_repeatable():
    schedule = plan(first_node_load=0.4, payload_length=1500)[-1]
    first = estimate_duty_cycle(schedule, 5.0)
    assert estimate_duty_cycle(schedule, 5.0) == first
    assert first == estimate_duty_cycle(schedule, 5.0, np.random.default_rng(Config.SEED))
