#!/usr/bin/env python3
# DAQ Streamer - configures NI-DAQmx from an INI file and prints analog samples

from __future__ import annotations

import argparse
import logging
import math
import signal
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import numpy as np

import nidaqmx
from nidaqmx import stream_readers
from nidaqmx.constants import AcquisitionType, Edge
from nidaqmx.errors import Error as DaqmxError

import config_store
from channel_resolver import AcquisitionPlan, SamplingSpec, resolve_plan
from config import (
    CHANNEL_SECTION_KEYWORD,
    CONFIG_PATH,
    DEBUG_ENABLE,
    DEBUG_RAW_SUMMARY,
    DEBUG_SAMPLE_EVERY_N,
    DEFAULT_SAMPLES_PER_CHAN,
    LOG_LEVEL,
    READ_INTERVAL_S,
    READ_TIMEOUT_S,
    TASK_SECTION_KEYWORD,
)
from config_store import ConfigError
from devices.channel_registry import ChannelRegistry

logger = logging.getLogger(__name__)


class DAQStreamer:
    """Runs one NI-DAQmx task built from an AcquisitionPlan.

    The task is created, filled with channels, timed, started and then read
    in a loop until stop() is called or the process is interrupted. The task
    is always closed on the way out.
    """

    def __init__(
        self,
        plan: AcquisitionPlan,
        read_timeout_s: float = READ_TIMEOUT_S,
        read_interval_s: float = READ_INTERVAL_S,
        debug: bool = DEBUG_ENABLE,
        task_factory: Callable[[], nidaqmx.Task] = nidaqmx.Task,
        reader_factory: Callable = stream_readers.AnalogMultiChannelReader,
    ):
        self.plan = plan
        self.read_timeout_s = read_timeout_s
        self.read_interval_s = read_interval_s
        self.debug = debug
        self.running = False
        self.read_count = 0
        self._task_factory = task_factory
        self._reader_factory = reader_factory
        self.channels = [ChannelRegistry.create_channel(spec) for spec in plan.channels]

    @property
    def samples_per_read(self) -> int:
        """Samples per channel fetched by each read.

        Sized to read_interval_s worth of data at the resolved rate. Without a
        sample clock the task is software-timed and reads one sample at a time.
        """
        sampling = self.plan.sampling
        if sampling is None:
            return 1
        return max(1, int(round(sampling.rate * self.read_interval_s)))

    def configure_task(self, task: nidaqmx.Task) -> None:
        for channel in self.channels:
            logger.info(f"Creating channel {channel.channel_info}...")
            channel.configure_channel(task)
        logger.info("Channel creation complete.")

        sampling = self.plan.sampling
        if sampling is not None:
            logger.info(
                f"Configuring sample clock at {sampling.rate} Hz with "
                f"{sampling.samples_per_channel}-sample buffer"
            )
            task.timing.cfg_samp_clk_timing(
                rate=sampling.rate,
                active_edge=Edge.RISING,
                sample_mode=AcquisitionType.CONTINUOUS,
                samps_per_chan=sampling.samples_per_channel,
            )
        else:
            logger.info("No task section resolved; using on-demand (software-timed) reads")

        logger.info(f"Channels in task: {', '.join(task.channel_names)}")

    def report(self, data: np.ndarray, samples_read: int) -> None:
        """Print one chunk to stdout, one line per scan."""
        print(f"Read {samples_read} samples per channel:")
        for scan in range(samples_read):
            print("\t".join(f"{value:.6f}" for value in data[:, scan]))

    def _log_summary(self, data: np.ndarray, samples_read: int) -> None:
        if not (self.debug and DEBUG_RAW_SUMMARY):
            return
        if self.read_count % max(1, DEBUG_SAMPLE_EVERY_N) != 0 or samples_read == 0:
            return
        window = data[:, :samples_read]
        for channel, samples in zip(self.channels, window):
            logger.info(
                f"{channel.physical_channel}: avg={np.mean(samples):.6f} "
                f"min={np.min(samples):.6f} max={np.max(samples):.6f}"
            )

    def stream(self, task: nidaqmx.Task) -> None:
        reader = self._reader_factory(task.in_stream)
        samples_per_read = self.samples_per_read
        buffer = np.zeros((len(self.channels), samples_per_read), dtype=np.float64)

        logger.info("Acquiring samples... press Ctrl+C to stop.")
        while self.running:
            samples_read = reader.read_many_sample(
                buffer,
                number_of_samples_per_channel=samples_per_read,
                timeout=self.read_timeout_s,
            )
            self.read_count += 1
            self.report(buffer, samples_read)
            self._log_summary(buffer, samples_read)

    def run(self) -> None:
        if not self.channels:
            raise RuntimeError("No channels resolved from the configuration; nothing to acquire.")

        self.running = True
        try:
            with self._task_factory() as task:
                self.configure_task(task)
                task.start()
                try:
                    self.stream(task)
                finally:
                    task.stop()
        finally:
            self.running = False

    def stop(self) -> None:
        self.running = False


# Global reference for signal handler
streamer_instance: Optional[DAQStreamer] = None


def signal_handler(signum, frame):
    """Handle shutdown signals gracefully"""
    logger.info(f"Received signal {signum}, shutting down gracefully...")
    if streamer_instance is not None:
        streamer_instance.stop()
    raise KeyboardInterrupt


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Configure an NI-DAQmx task from an INI file and stream analog samples to the console."
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path(CONFIG_PATH),
        help=f"INI file describing channels and sampling (default: {CONFIG_PATH}).",
    )
    parser.add_argument(
        "--channel-keyword",
        default=CHANNEL_SECTION_KEYWORD,
        help=f"Sections whose name contains this create channels (default: {CHANNEL_SECTION_KEYWORD}).",
    )
    parser.add_argument(
        "--task-keyword",
        default=TASK_SECTION_KEYWORD,
        help=f"First section containing this sets the sample clock (default: {TASK_SECTION_KEYWORD}).",
    )
    parser.add_argument(
        "--rate",
        type=float,
        default=None,
        help="Sample rate in Hz used when the file has no task section.",
    )
    parser.add_argument(
        "--samples-per-chan",
        dest="samples_per_chan",
        type=int,
        default=DEFAULT_SAMPLES_PER_CHAN,
        help=f"Buffer size per channel used with --rate (default: {DEFAULT_SAMPLES_PER_CHAN}).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=READ_TIMEOUT_S,
        help=f"Per-read timeout in seconds (default: {READ_TIMEOUT_S}).",
    )
    parser.add_argument(
        "--read-interval",
        dest="read_interval",
        type=float,
        default=READ_INTERVAL_S,
        help=f"Seconds of data fetched per read (default: {READ_INTERVAL_S}).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=DEBUG_ENABLE,
        help="Log per-read min/max/avg summaries.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default=LOG_LEVEL,
        help=f"Logger level (default: {LOG_LEVEL}).",
    )
    args = parser.parse_args(argv)
    if args.rate is not None and not (math.isfinite(args.rate) and args.rate > 0):
        parser.error("--rate must be a finite positive number")
    if args.samples_per_chan <= 0:
        parser.error("--samples-per-chan must be positive")
    if not (math.isfinite(args.read_interval) and args.read_interval > 0):
        parser.error("--read-interval must be a finite positive number")
    return args


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    global streamer_instance

    args = _parse_args(argv)
    _configure_logging(args.log_level)

    default_sampling = None
    if args.rate is not None:
        default_sampling = SamplingSpec(rate=args.rate, samples_per_channel=args.samples_per_chan)

    try:
        mapping = config_store.load(args.config)
        plan = resolve_plan(mapping, default_sampling, args.channel_keyword, args.task_keyword)
    except ConfigError as exc:
        logger.error(f"Configuration error: {exc}")
        return 1

    if not plan.channels:
        supported = ", ".join(t.value for t in ChannelRegistry.list_measurement_types())
        logger.error(f"No supported channels found in {args.config} (supported measurement types: {supported})")
        return 1

    # Set up signal handlers for graceful shutdown
    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    streamer_instance = DAQStreamer(
        plan,
        read_timeout_s=args.timeout,
        read_interval_s=args.read_interval,
        debug=args.debug,
    )
    try:
        streamer_instance.run()
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
    except DaqmxError as exc:
        logger.error(f"DAQmx Error: {exc}")
        return 1
    finally:
        streamer_instance.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
