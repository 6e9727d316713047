"""Stand-ins for nidaqmx task objects so channel/timing setup runs without hardware."""

from __future__ import annotations

from typing import Any, Dict, List, Tuple


class FakeAIChannels:
    def __init__(self, task: "FakeTask"):
        self._task = task

    def _record(self, method: str, physical_channel: str, kwargs: Dict[str, Any]) -> None:
        self._task.calls.append((method, physical_channel, kwargs))
        self._task.channel_names.append(physical_channel)

    def add_ai_voltage_chan(self, physical_channel, **kwargs):
        self._record("add_ai_voltage_chan", physical_channel, kwargs)

    def add_ai_current_chan(self, physical_channel, **kwargs):
        self._record("add_ai_current_chan", physical_channel, kwargs)

    def add_ai_accel_chan(self, physical_channel, **kwargs):
        self._record("add_ai_accel_chan", physical_channel, kwargs)


class FakeTiming:
    def __init__(self, task: "FakeTask"):
        self._task = task

    def cfg_samp_clk_timing(self, **kwargs):
        self._task.calls.append(("cfg_samp_clk_timing", None, kwargs))


class FakeTask:
    def __init__(self):
        self.calls: List[Tuple[str, Any, Dict[str, Any]]] = []
        self.channel_names: List[str] = []
        self.ai_channels = FakeAIChannels(self)
        self.timing = FakeTiming(self)
        self.in_stream = object()
        self.started = False
        self.stopped = False
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.closed = True

    def start(self):
        self.calls.append(("start", None, {}))
        self.started = True

    def stop(self):
        self.calls.append(("stop", None, {}))
        self.stopped = True

    @property
    def method_names(self) -> List[str]:
        return [call[0] for call in self.calls]


class FakeReader:
    """Fills the buffer with a ramp and stops the streamer after ``reads`` reads."""

    def __init__(self, streamer, reads: int = 1, error: Exception = None):
        self.streamer = streamer
        self.reads = reads
        self.error = error
        self.requests: List[Tuple[Tuple[int, ...], int, float]] = []

    def __call__(self, in_stream):
        return self

    def read_many_sample(self, data, number_of_samples_per_channel, timeout):
        self.requests.append((data.shape, number_of_samples_per_channel, timeout))
        if self.error is not None:
            raise self.error
        rows, cols = data.shape
        for row in range(rows):
            for col in range(cols):
                data[row, col] = row + col / 10.0
        if len(self.requests) >= self.reads:
            self.streamer.stop()
        return number_of_samples_per_channel
