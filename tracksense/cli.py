"""Command-line entry point.

Two run modes:
  1) ``simulate``: serve simulated NMEA on a pseudo-terminal, optionally
     relaying it back through the tracker (``--relay``)
  2) ``track``: read a real receiver on a serial port and forward fixes
     as CSV datagrams
"""

import argparse
import contextlib
import logging
import sys
import time

from tracksense import config
from tracksense.config import SimulatorConfig, TrackerConfig
from tracksense.errors import PortUnavailableError
from tracksense.gnss import SentenceConsumer, SerialSource
from tracksense.net import DatagramSink
from tracksense.sim import SentenceProducer, TrajectoryConfig, VirtualSerialLink

__all__ = ["build_parser", "configure_logging", "main"]

logger = logging.getLogger(__name__)

_LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
_POLL_INTERVAL = 0.2


def configure_logging(level: str = "INFO") -> None:
    """Attach a stderr handler to the root logger, once."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)


def _wait(duration: float | None, worker: SentenceConsumer | None = None) -> None:
    """Block for *duration* seconds (forever if None) or until Ctrl-C.

    Returns early if *worker* is given and its thread exits on its own.
    """
    deadline = None if duration is None else time.monotonic() + duration
    with contextlib.suppress(KeyboardInterrupt):
        while deadline is None or time.monotonic() < deadline:
            if worker is not None and not worker.alive:
                return
            remaining = _POLL_INTERVAL if deadline is None else deadline - time.monotonic()
            time.sleep(max(0.0, min(_POLL_INTERVAL, remaining)))


def _tracker_config(args: argparse.Namespace, port: str, baudrate: int) -> TrackerConfig:
    return TrackerConfig(
        serial_port=port,
        baudrate=baudrate,
        dest_host=args.dest_host,
        dest_port=args.dest_port,
        strict_checksum=args.strict_checksum,
    )


def _relay(stack: contextlib.ExitStack, tracker: TrackerConfig) -> SentenceConsumer:
    source = stack.enter_context(SerialSource(tracker.serial_port, tracker.baudrate))
    sink = stack.enter_context(DatagramSink(tracker.dest_host, tracker.dest_port))
    consumer = SentenceConsumer(source, sink, strict_checksum=tracker.strict_checksum)
    stack.enter_context(consumer)
    logger.info("Relaying %s to %s:%d.", tracker.serial_port, *sink.destination)
    return consumer


def _cmd_simulate(args: argparse.Namespace) -> int:
    sim = SimulatorConfig(
        base_latitude=args.lat,
        base_longitude=args.lon,
        base_altitude=args.alt,
        update_hz=args.rate,
        speed_mps=args.speed,
        pty_baudrate=args.baudrate,
        trajectory=TrajectoryConfig(
            enabled=args.circle,
            radius_m=args.radius,
            period_s=args.period,
        ),
    )
    with contextlib.ExitStack() as stack:
        link = stack.enter_context(VirtualSerialLink(sim.pty_baudrate))
        print(f"Simulated receiver on {link.companion_path}", flush=True)
        producer = SentenceProducer(
            link,
            sim.base_latitude,
            sim.base_longitude,
            sim.base_altitude,
            sim.update_hz,
            sim.speed_mps,
            satellites=sim.satellites,
            hdop=sim.hdop,
            trajectory=sim.trajectory,
        )
        stack.enter_context(producer)
        consumer = None
        if args.relay:
            tracker = _tracker_config(args, link.companion_path, sim.pty_baudrate)
            consumer = _relay(stack, tracker)
        _wait(args.duration, consumer)
    if consumer is not None and consumer.error is not None:
        return 1
    return 0


def _cmd_track(args: argparse.Namespace) -> int:
    tracker = _tracker_config(args, args.port, args.baudrate)
    with contextlib.ExitStack() as stack:
        consumer = _relay(stack, tracker)
        _wait(args.duration, consumer)
    if consumer.error is not None:
        return 1
    return 0


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--duration", type=float, default=None, help="Seconds to run (default: until Ctrl-C)"
    )
    parser.add_argument(
        "--log-level", choices=_LOG_LEVELS, default="INFO", help="Logging verbosity"
    )


def _add_destination_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--dest-host", default=config.DEFAULT_DEST_HOST, help="UDP destination host")
    parser.add_argument("--dest-port", type=int, default=config.DEFAULT_DEST_PORT, help="UDP destination port")
    parser.add_argument(
        "--strict-checksum", action="store_true", help="Drop sentences with a bad checksum"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tracksense", description="NMEA simulator and relay")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sim = sub.add_parser("simulate", help="Serve simulated NMEA on a pseudo-terminal")
    sim.add_argument("--lat", type=float, default=config.DEFAULT_BASE_LATITUDE, help="Base latitude (deg)")
    sim.add_argument("--lon", type=float, default=config.DEFAULT_BASE_LONGITUDE, help="Base longitude (deg)")
    sim.add_argument("--alt", type=float, default=config.DEFAULT_BASE_ALTITUDE, help="Altitude (m)")
    sim.add_argument("--rate", type=float, default=config.DEFAULT_UPDATE_HZ, help="Update rate (Hz)")
    sim.add_argument("--speed", type=float, default=config.DEFAULT_SPEED_MPS, help="Speed (m/s)")
    sim.add_argument("--baudrate", type=int, default=config.DEFAULT_PTY_BAUDRATE, help="Pty baud rate")
    sim.add_argument("--circle", action="store_true", help="Move on a circle around the base")
    sim.add_argument("--radius", type=float, default=20.0, help="Circle radius (m)")
    sim.add_argument("--period", type=float, default=120.0, help="Seconds per revolution")
    sim.add_argument("--relay", action="store_true", help="Also relay the output as CSV datagrams")
    _add_destination_arguments(sim)
    _add_common_arguments(sim)
    sim.set_defaults(func=_cmd_simulate)

    track = sub.add_parser("track", help="Relay a serial GNSS receiver as CSV datagrams")
    track.add_argument("--port", default=config.DEFAULT_SERIAL_PORT, help="Serial device path")
    track.add_argument("--baudrate", type=int, default=config.DEFAULT_SERIAL_BAUDRATE, help="Serial baud rate")
    _add_destination_arguments(track)
    _add_common_arguments(track)
    track.set_defaults(func=_cmd_track)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        status = args.func(args)
    except (PortUnavailableError, ValueError) as e:
        print(f"tracksense: {e}", file=sys.stderr)
        raise SystemExit(2) from e
    raise SystemExit(status)


if __name__ == "__main__":
    main()
