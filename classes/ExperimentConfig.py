"""
ExperimentConfig: Typed configuration records for one CDoS experiment run

Replaces string-keyed attribute maps with frozen dataclasses whose fields
are checked on construction, so a malformed run fails before any ns-3
object is created.

Copyright (c) 2025 CDoS Mitigation Study
Licensed under the MIT License
"""

import math
from dataclasses import dataclass
from typing import Tuple
from Config import Config


class ExperimentConfigError(ValueError):
    """Raised when an experiment parameter violates its precondition."""


def _require_int(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ExperimentConfigError(f"{name} must be an integer, got {value!r}")
    return value


def _require_real(name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ExperimentConfigError(f"{name} must be a real number, got {value!r}")
    if not math.isfinite(value):
        raise ExperimentConfigError(f"{name} must be finite, got {value!r}")
    return float(value)


@dataclass(frozen=True)
class MacSettings:
    """
    MAC-layer and link settings applied as ns-3 defaults before device install.

    Attributes:
        rts_cts_threshold: Frame size (bytes) above which RTS/CTS precedes data
        mtu: WifiNetDevice MTU
        fragmentation_threshold: Frame size above which frames are fragmented
        retry_limit: Retransmissions before a frame is dropped
        data_mode: Constant-rate data mode name
        control_mode: Constant-rate control mode name
        arp_dead_timeout: ARP dead entry timeout (seconds)
        arp_alive_timeout: ARP alive entry timeout (seconds)
    """
    rts_cts_threshold: int
    mtu: int = Config.MTU
    fragmentation_threshold: int = Config.FRAGMENTATION_THRESHOLD
    retry_limit: int = Config.RETRY_LIMIT
    data_mode: str = Config.DATA_MODE
    control_mode: str = Config.CONTROL_MODE
    arp_dead_timeout: float = Config.ARP_DEAD_TIMEOUT
    arp_alive_timeout: float = Config.ARP_ALIVE_TIMEOUT

    @classmethod
    def for_collision_avoidance(cls, enabled: bool) -> "MacSettings":
        threshold = Config.RTS_CTS_ON_THRESHOLD if enabled else Config.RTS_CTS_OFF_THRESHOLD
        return cls(rts_cts_threshold=threshold)

    @property
    def max_payload(self) -> int:
        return self.mtu - Config.HEADER_OVERHEAD


@dataclass(frozen=True)
class BuildingSpec:
    """Geometry and materials of the office building hosting the nodes."""
    bounds: Tuple[float, float, float, float, float, float] = Config.BUILDING_BOUNDS
    building_type: str = Config.BUILDING_TYPE
    ext_walls_type: str = Config.EXT_WALLS_TYPE
    rooms_x: int = Config.ROOMS_X
    rooms_y: int = Config.ROOMS_Y
    floors: int = Config.FLOORS
    internal_wall_loss: float = Config.INTERNAL_WALL_LOSS_DB
    frequency: float = Config.FREQUENCY_HZ

    def __post_init__(self):
        x_min, x_max, y_min, y_max, z_min, z_max = self.bounds
        if not (x_min < x_max and y_min < y_max and z_min < z_max):
            raise ExperimentConfigError(f"Degenerate building bounds {self.bounds}")
        for name in ("rooms_x", "rooms_y", "floors"):
            if _require_int(name, getattr(self, name)) < 1:
                raise ExperimentConfigError(f"{name} must be >= 1")


@dataclass(frozen=True)
class ExperimentConfig:
    """
    Immutable parameters of a single experiment run.

    Attributes:
        enable_cts_rts: Whether the RTS/CTS handshake precedes data frames
        node_count: Number of nodes (even: one sender and one receiver per pair)
        duration: Simulated seconds before the run stops
        first_node_load: Duty cycle of the distinguished pair (0 off, 1 saturating)
        rest_node_load: Duty cycle of every other pair, strictly between 0 and 1
        payload_length: UDP payload size in bytes
    """
    enable_cts_rts: bool
    node_count: int
    duration: float
    first_node_load: float
    rest_node_load: float
    payload_length: int

    def __post_init__(self):
        if not isinstance(self.enable_cts_rts, bool):
            raise ExperimentConfigError(
                f"enable_cts_rts must be a bool, got {self.enable_cts_rts!r}")

        node_count = _require_int("node_count", self.node_count)
        if node_count < 2 or node_count % 2:
            raise ExperimentConfigError(
                f"node_count must be an even number >= 2 (sender/receiver pairs), got {node_count}")

        if _require_real("duration", self.duration) <= 0:
            raise ExperimentConfigError(f"duration must be > 0, got {self.duration}")

        first = _require_real("first_node_load", self.first_node_load)
        if not 0.0 <= first <= 1.0:
            raise ExperimentConfigError(f"first_node_load must be in [0, 1], got {first}")

        rest = _require_real("rest_node_load", self.rest_node_load)
        if not 0.0 < rest < 1.0:
            raise ExperimentConfigError(f"rest_node_load must be in (0, 1), got {rest}")

        payload = _require_int("payload_length", self.payload_length)
        max_payload = self.mac_settings().max_payload
        if not 0 < payload <= max_payload:
            raise ExperimentConfigError(
                f"payload_length must be in (0, {max_payload}] bytes, got {payload}")

    @property
    def pair_count(self) -> int:
        return self.node_count // 2

    def mac_settings(self) -> MacSettings:
        return MacSettings.for_collision_avoidance(self.enable_cts_rts)

    def describe(self) -> str:
        return (f"CTS/RTS={'on' if self.enable_cts_rts else 'off'}, nodes={self.node_count}, "
                f"T={self.duration}s, u_0={self.first_node_load:.2f}, "
                f"rho={self.rest_node_load:.2f}, payload={self.payload_length}B")
