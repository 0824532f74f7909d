"""
CDoS: Cascading Denial-of-Service experiment on an ad-hoc Wi-Fi network

This module runs one experiment of the cascading DoS mitigation study on
ns-3. A line of sender/receiver pairs shares one 802.11g channel inside an
office building; every pair but one carries Poisson-like on/off UDP traffic
at a fixed duty cycle, while the distinguished pair joins late with its own
load (saturating by default). Whether the late saturating sender triggers a
network-wide collision/backoff cascade depends on the payload length and on
whether RTS/CTS precedes data frames.

Key Responsibilities:
    - MAC Defaults: RTS/CTS threshold, MTU, retry limit, static ARP
    - Topology: building, node placement and shared channel (BuildingChannel)
    - Devices & Stack: constant-rate 802.11g ad-hoc devices, IPv4 10.0.0.0/8
    - Traffic: one OnOffApplication/PacketSink flow per pair (TrafficPlan)
    - Address Priming: one UDP echo request per sender before traffic starts
    - Statistics: Athstats files per device under a run-specific directory
    - Lifecycle: run to the stop time, then reset the global simulator

Result interpretation (from the study):
    With 1500-byte payloads the late saturating sender makes the cascade
    feasible; with 200-byte payloads it is not, and the network reaches its
    highest saturation throughput.

Copyright (c) 2025 CDoS Mitigation Study
Licensed under the MIT License
"""

import time as time_module
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from ns import ns
from Config import Config
from ExperimentConfig import ExperimentConfig, MacSettings
from NodePair import NodePair, build_pairs
from TrafficPlan import TrafficSchedule, ProbeSchedule, plan_traffic, plan_probes
from BuildingChannel import Topology, build_topology
from StatsOutput import prepare_run_dir, stats_prefix, list_stats_files
import NsCallbacks


@dataclass
class ExperimentResult:
    """
    Outcome of one completed experiment.

    Attributes:
        config: Parameters the run used
        run_dir: Directory holding the per-device statistics files
        stats_files: Statistics files found in run_dir after the run
        sim_end: Simulated time at which the run stopped (seconds)
        wall_clock: Real time the run took (seconds)
    """
    config: ExperimentConfig
    run_dir: Path
    stats_files: List[Path]
    sim_end: float
    wall_clock: float


def has_attribute(type_name: str, attribute: str) -> bool:
    info = ns.TypeId.AttributeInformation()
    return bool(ns.TypeId.LookupByName(type_name).LookupAttributeByName(attribute, info))


def retry_limit_attribute() -> str:
    """
    Config path of the frame retry limit.

    It lives on WifiMac (FrameRetryLimit) in current ns-3 releases and on
    WifiRemoteStationManager (MaxSlrc) in older ones. Setting the obsolete
    MaxSlrc on a current release is fatal, so the lookup comes first.
    """
    if has_attribute("ns3::WifiMac", "FrameRetryLimit"):
        return "ns3::WifiMac::FrameRetryLimit"
    return "ns3::WifiRemoteStationManager::MaxSlrc"


def apply_mac_defaults(mac: MacSettings) -> None:
    """Set process-wide ns-3 attribute defaults; must run before devices exist."""
    ns.Config.SetDefault("ns3::WifiRemoteStationManager::RtsCtsThreshold",
                         ns.UintegerValue(mac.rts_cts_threshold))
    ns.Config.SetDefault("ns3::WifiNetDevice::Mtu", ns.UintegerValue(mac.mtu))
    ns.Config.SetDefault("ns3::ArpCache::DeadTimeout", ns.TimeValue(ns.Seconds(mac.arp_dead_timeout)))
    ns.Config.SetDefault("ns3::ArpCache::AliveTimeout", ns.TimeValue(ns.Seconds(mac.arp_alive_timeout)))
    ns.Config.SetDefault(retry_limit_attribute(), ns.UintegerValue(mac.retry_limit))


class ExperimentSession:
    """
    Owns the global ns-3 simulator for the duration of one experiment.

    ns-3 keeps a single process-wide event queue and clock, so the session
    is a context manager: whatever happens inside the `with` block, leaving
    it destroys the simulator and releases the Python event callbacks, and
    the next experiment starts from virtual time zero.

    Usage:
        with ExperimentSession(config) as session:
            session.setup()
            result = session.run()
    """

    def __init__(self, config: ExperimentConfig, output_root=None):
        self.config = config
        self.output_root = Config.OUTPUT_ROOT if output_root is None else output_root
        self.pairs: List[NodePair] = build_pairs(config.node_count)
        self.traffic: List[TrafficSchedule] = plan_traffic(config, self.pairs)
        self.probes: List[ProbeSchedule] = plan_probes(self.pairs)

        self.run_dir: Optional[Path] = None
        self.topology: Optional[Topology] = None
        self.devices = None
        self.interfaces = None
        self.apps = None
        self.probe_apps = None
        self.athstats = None
        self._event_refs = []
        self._stream = 1
        self._active = False

    def __enter__(self) -> "ExperimentSession":
        self._active = True
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.teardown()
        return False

    # ------------------------------------------------------------------ setup

    def setup(self) -> None:
        """
        Build the complete experiment in the ns-3 simulator.

        The statistics directory is prepared first so an unusable output
        path fails the run before any ns-3 object is created.
        """
        self.run_dir = prepare_run_dir(self.config, self.output_root)

        NsCallbacks.setup_cppyy_callbacks()
        for component in Config.NS_LOG_COMPONENTS:
            ns.LogComponentEnable(component, ns.LOG_LEVEL_INFO)

        apply_mac_defaults(self.config.mac_settings())

        self.topology = build_topology(self.config.node_count)
        self._stream += self.topology.loss_model.AssignStreams(self._stream)

        self._install_devices()
        self._install_internet()
        self._install_traffic()
        self._install_probes()
        self._enable_stats()
        self._schedule_progress()

    def _install_devices(self) -> None:
        mac_settings = self.config.mac_settings()

        wifi = ns.WifiHelper()
        wifi.SetStandard(ns.WIFI_STANDARD_80211g)
        wifi.SetRemoteStationManager("ns3::ConstantRateWifiManager",
                                     "DataMode", ns.StringValue(mac_settings.data_mode),
                                     "ControlMode", ns.StringValue(mac_settings.control_mode),
                                     "FragmentationThreshold",
                                     ns.UintegerValue(mac_settings.fragmentation_threshold))

        phy = ns.YansWifiPhyHelper()
        phy.SetChannel(self.topology.channel)

        mac = ns.WifiMacHelper()
        mac.SetType("ns3::AdhocWifiMac")

        self.devices = wifi.Install(phy, mac, self.topology.nodes)
        self._stream += wifi.AssignStreams(self.devices, self._stream)

    def _install_internet(self) -> None:
        internet = ns.InternetStackHelper()
        internet.Install(self.topology.nodes)
        self._stream += internet.AssignStreams(self.topology.nodes, self._stream)

        address = ns.Ipv4AddressHelper()
        address.SetBase(ns.Ipv4Address(Config.NETWORK_BASE), ns.Ipv4Mask(Config.NETWORK_MASK))
        self.interfaces = address.Assign(self.devices)

    def _install_traffic(self) -> None:
        """
        Install one OnOff sender and one PacketSink per pair.

        Senders transmit to the receiver's address on the pair's own port;
        the sink listens on that port only, so flows never mix.
        """
        nodes = self.topology.nodes
        self.apps = ns.ApplicationContainer()

        for plan in self.traffic:
            pair = plan.pair
            remote = ns.InetSocketAddress(ns.Ipv4Address(pair.receiver_address), pair.port)
            onoff = ns.OnOffHelper("ns3::UdpSocketFactory", remote.ConvertTo())
            onoff.SetAttribute("PacketSize", ns.UintegerValue(plan.packet_size))
            onoff.SetAttribute("OnTime", ns.StringValue(plan.on_time.to_ns_string()))
            onoff.SetAttribute("OffTime", ns.StringValue(plan.off_time.to_ns_string()))
            onoff.SetAttribute("DataRate", ns.StringValue(f"{plan.data_rate}bps"))

            sender_apps = onoff.Install(nodes.Get(pair.sender))
            sender_apps.Start(ns.Seconds(plan.start))
            if plan.stop is not None:
                sender_apps.Stop(ns.Seconds(plan.stop))
            self._stream += onoff.AssignStreams(ns.NodeContainer(nodes.Get(pair.sender)), self._stream)
            self.apps.Add(sender_apps)

            local = ns.InetSocketAddress(ns.Ipv4Address.GetAny(), pair.port)
            sink = ns.PacketSinkHelper("ns3::UdpSocketFactory", local.ConvertTo())
            self.apps.Add(sink.Install(nodes.Get(pair.receiver)))

    def _install_probes(self) -> None:
        """
        Send one small UDP echo request per sender before the flows start.

        The request forces ARP resolution of the receiver while the channel
        is idle; start times are staggered so the requests do not collide.
        """
        nodes = self.topology.nodes
        self.probe_apps = ns.ApplicationContainer()

        for probe in self.probes:
            pair = probe.pair
            client = ns.UdpEchoClientHelper(ns.Ipv4Address(pair.receiver_address).ConvertTo(), probe.port)
            client.SetAttribute("MaxPackets", ns.UintegerValue(probe.max_packets))
            client.SetAttribute("Interval", ns.TimeValue(ns.Seconds(probe.interval)))
            client.SetAttribute("PacketSize", ns.UintegerValue(probe.size))

            client_apps = client.Install(nodes.Get(pair.sender))
            client_apps.Start(ns.Seconds(probe.start))
            self.probe_apps.Add(client_apps)

    def _enable_stats(self) -> None:
        self.athstats = ns.AthstatsHelper()
        self.athstats.EnableAthstats(stats_prefix(self.run_dir), self.devices)

    def _schedule_progress(self) -> None:
        interval = float(Config.PROGRESS_INTERVAL)
        if interval <= 0:
            return

        def report():
            now = ns.Simulator.Now().GetSeconds()
            print(f"   ⏱  t={now:.1f}s / {self.config.duration}s")
            if now + interval < self.config.duration:
                NsCallbacks.schedule(interval, report, self._event_refs)

        NsCallbacks.schedule(interval, report, self._event_refs)

    # -------------------------------------------------------------------- run

    def run(self) -> ExperimentResult:
        """
        Run the simulator until the configured duration and collect the outcome.

        Returns:
            ExperimentResult with the statistics files written by Athstats
        """
        if self.topology is None:
            raise RuntimeError("ExperimentSession.run() called before setup()")

        wall_start = time_module.time()
        ns.Simulator.Stop(ns.Seconds(self.config.duration))

        print(f"Starting simulator run (stop time: {self.config.duration}s)...")
        ns.Simulator.Run()

        sim_end = ns.Simulator.Now().GetSeconds()
        print(f"Simulator finished at {sim_end}s")

        return ExperimentResult(
            config=self.config,
            run_dir=self.run_dir,
            stats_files=list_stats_files(self.run_dir),
            sim_end=sim_end,
            wall_clock=time_module.time() - wall_start,
        )

    # --------------------------------------------------------------- teardown

    def teardown(self) -> None:
        """Destroy the global simulator state; idempotent."""
        if not self._active:
            return
        self._active = False
        try:
            ns.Simulator.Destroy()
        finally:
            NsCallbacks.clear_callbacks()
            self._event_refs.clear()
            self.apps = None
            self.probe_apps = None
            self.athstats = None
            self.devices = None
            self.interfaces = None
            self.topology = None


def experiment(enable_cts_rts: bool, node_count: int, duration: float,
               first_node_load: float, rest_node_load: float, payload_length: int,
               output_root=None) -> ExperimentResult:
    """
    Configure, run and tear down a single experiment.

    Args:
        enable_cts_rts: Precede (nearly) every data frame with RTS/CTS
        node_count: Even number of nodes, node 2i sends to node 2i+1
        duration: Simulated seconds
        first_node_load: Load of the distinguished (late) pair; 1 saturates, 0 silences
        rest_node_load: Load of every other pair, in (0, 1)
        payload_length: UDP payload in bytes
        output_root: Sweep output directory, Config.OUTPUT_ROOT if omitted

    Returns:
        ExperimentResult of the completed run

    Raises:
        ExperimentConfigError: invalid parameters (raised before ns-3 is touched)
        OutputDirectoryError: the statistics directory cannot be prepared
    """
    config = ExperimentConfig(
        enable_cts_rts=enable_cts_rts,
        node_count=node_count,
        duration=duration,
        first_node_load=first_node_load,
        rest_node_load=rest_node_load,
        payload_length=payload_length,
    )
    print(f"🔧 Configuration: {config.describe()}")

    with ExperimentSession(config, output_root) as session:
        try:
            session.setup()
            print(f"📁 Statistics directory: {session.run_dir}")
            result = session.run()
        except Exception as e:
            print(f"Error during simulation execution: {e}")
            raise

    print(f"✅ {len(result.stats_files)} statistics files written "
          f"({result.wall_clock:.1f}s wall clock)")
    return result
