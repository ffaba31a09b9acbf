"""GNSS receiver simulator: trajectory, sentence producer and pty link."""

from tracksense.sim.link import VirtualSerialLink
from tracksense.sim.producer import SentenceProducer
from tracksense.sim.trajectory import Trajectory, TrajectoryConfig, TrajectoryMode

__all__ = [
    "SentenceProducer",
    "Trajectory",
    "TrajectoryConfig",
    "TrajectoryMode",
    "VirtualSerialLink",
]
