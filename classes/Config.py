"""
CDoS Experiment Configuration Parameters

This module defines the compiled-in parameters of the cascading DoS
experiment: an ad-hoc 802.11g network of sender/receiver pairs placed in a
line inside a one-floor office building.

Parameter categories:
- RNG seeding
- Building geometry and wall materials
- Node placement along the building axis
- PHY/MAC settings (rates, RTS/CTS, retries, MTU, static ARP)
- Addressing and ports
- Traffic timing (start/stop windows, probes)
- Sweep parameters and output layout

Copyright (c) 2025 CDoS Mitigation Study
Licensed under the MIT License
"""

class Config:
    """Global configuration parameters for the cascading DoS experiment"""

    SEED = 1
    RUN = 0

    # ============================================================================
    # Building Model
    # ============================================================================
    # (xMin, xMax, yMin, yMax, zMin, zMax) in metres
    BUILDING_BOUNDS = (0.0, 44.0, -3.0, 3.0, 0.0, 3.0)
    BUILDING_TYPE = "Office"
    EXT_WALLS_TYPE = "ConcreteWithWindows"
    ROOMS_X, ROOMS_Y, FLOORS = 11, 1, 1
    INTERNAL_WALL_LOSS_DB = 12.0
    FREQUENCY_HZ = 2.4e9

    # ============================================================================
    # Node Placement
    # ============================================================================
    FIRST_NODE_X = 43.5
    NODE_SPACING = 4.0
    NODE_Y = 0.0
    NODE_Z = 1.0

    # ============================================================================
    # PHY / MAC Parameters
    # ============================================================================
    DATA_MODE = "ErpOfdmRate6Mbps"
    CONTROL_MODE = "DsssRate1Mbps"
    DATA_RATE_BPS = 6000000
    FRAGMENTATION_THRESHOLD = 2300
    RETRY_LIMIT = 7
    MTU = 2296
    RTS_CTS_ON_THRESHOLD = 100
    # largest value WifiRemoteStationManager::RtsCtsThreshold accepts (uint32 0:4692480)
    RTS_CTS_OFF_THRESHOLD = 4692480

    # UDP (8) + IPv4 (20) + LLC/SNAP (8)
    HEADER_OVERHEAD = 36

    # Static ARP: entries never expire during a run
    ARP_DEAD_TIMEOUT = 0.0
    ARP_ALIVE_TIMEOUT = 120000.0

    # ============================================================================
    # Addressing
    # ============================================================================
    NETWORK_BASE = "10.0.0.0"
    NETWORK_MASK = "255.0.0.0"
    TRAFFIC_BASE_PORT = 12345
    PROBE_PORT = 9
    PROBE_SIZE = 10
    PROBE_INTERVAL = 100000.0

    # ============================================================================
    # Traffic Timing
    # ============================================================================
    REST_START = 3.100
    REST_START_STEP = 0.01
    FIRST_START = 53.0
    FIRST_STOP = 153.0
    PROBE_START = 0.001
    PROBE_START_STEP = 0.001

    # ============================================================================
    # Sweep
    # ============================================================================
    ENABLE_CTS_RTS = False
    NUM_NODES = 6
    DURATION = 203
    FIRST_NODE_LOAD = 1.0
    REST_NODE_LOAD = 0.14
    PAYLOAD_LENGTHS = (200, 1500)

    # ============================================================================
    # Output & Console
    # ============================================================================
    OUTPUT_ROOT = "CDoS-6Mbps-adhoc-UDP-building"
    STATS_PREFIX = "nodes"
    PROGRESS_INTERVAL = 50.0
    NS_LOG_COMPONENTS = []
