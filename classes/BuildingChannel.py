"""
BuildingChannel: Office-building topology and shared Wi-Fi channel

Builds the one-floor office building, places the nodes on a line inside it
and creates the single YansWifiChannel every device attaches to. Path loss
between any two nodes comes from a HybridBuildingsPropagationLossModel, so
the number of internal walls separating them is accounted for.

Building model (11 rooms of 4 m, nodes 4 m apart along x):

    ^  ------------------------------------------------------
    |  |    |    |    |    |    |    |    |    |    |    |    |
    6m |    |    |    |    |    | n5 | n4 | n3 | n2 | n1 | n0 |
    |  |    |    |    |    |    |    |    |    |    |    |    |
    v  ------------------------------------------------------
       <-4m->                                         x = 44

Copyright (c) 2025 CDoS Mitigation Study
Licensed under the MIT License
"""

from dataclasses import dataclass
from typing import List, Tuple
from ns import ns
from ExperimentConfig import BuildingSpec
from NodePair import node_positions


@dataclass
class Topology:
    """
    ns-3 objects shared by every device of one experiment.

    Attributes:
        nodes: NodeContainer with node_count nodes, index i at positions[i]
        building: The ns-3 Building the nodes are placed in
        loss_model: Hybrid indoor/outdoor propagation loss model
        channel: Shared YansWifiChannel using loss_model
        positions: (x, y, z) of each node
    """
    nodes: object
    building: object
    loss_model: object
    channel: object
    positions: List[Tuple[float, float, float]]


def create_building(spec: BuildingSpec):
    building = ns.CreateObject[ns.Building]()
    building.SetBoundaries(ns.Box(*spec.bounds))
    building.SetBuildingType(getattr(ns.Building, spec.building_type))
    building.SetExtWallsType(getattr(ns.Building, spec.ext_walls_type))
    building.SetNRoomsX(spec.rooms_x)
    building.SetNRoomsY(spec.rooms_y)
    building.SetNFloors(spec.floors)
    return building


def create_loss_model(spec: BuildingSpec):
    loss_model = ns.CreateObject[ns.HybridBuildingsPropagationLossModel]()
    loss_model.SetAttribute("Frequency", ns.DoubleValue(spec.frequency))
    loss_model.SetAttribute("InternalWallLoss", ns.DoubleValue(spec.internal_wall_loss))
    return loss_model


def place_nodes(nodes, positions):
    """Give every node a fixed position and register it with the building model."""
    mobility = ns.MobilityHelper()
    mobility.SetMobilityModel("ns3::ConstantPositionMobilityModel")

    allocator = ns.ListPositionAllocator()
    for x, y, z in positions:
        allocator.Add(ns.Vector(x, y, z))
    mobility.SetPositionAllocator(allocator)
    mobility.Install(nodes)

    # aggregates MobilityBuildingInfo so loss queries know each node's room
    ns.BuildingsHelper.Install(nodes)


def build_topology(node_count: int, spec: BuildingSpec = None) -> Topology:
    """
    Create nodes, building and channel for an experiment.

    Args:
        node_count: Number of nodes to create
        spec: Building geometry/materials, BuildingSpec() defaults if omitted

    Returns:
        Topology holding the created ns-3 objects
    """
    spec = spec if spec is not None else BuildingSpec()

    nodes = ns.NodeContainer()
    nodes.Create(node_count)

    building = create_building(spec)
    loss_model = create_loss_model(spec)

    positions = node_positions(node_count)
    place_nodes(nodes, positions)

    channel = ns.CreateObject[ns.YansWifiChannel]()
    channel.SetPropagationLossModel(loss_model)
    channel.SetPropagationDelayModel(ns.CreateObject[ns.ConstantSpeedPropagationDelayModel]())

    return Topology(nodes=nodes, building=building, loss_model=loss_model,
                    channel=channel, positions=positions)
