# Base channel builder class
import nidaqmx
from abc import ABC, abstractmethod
from nidaqmx.constants import TerminalConfiguration
from typing import Dict, Any

from channel_resolver import ChannelSpec

TERMINAL_CONFIGS = {
    "Default": TerminalConfiguration.DEFAULT,
    "RSE": TerminalConfiguration.RSE,
    "NRSE": TerminalConfiguration.NRSE,
    "Differential": TerminalConfiguration.DIFF,
    "Pseudodifferential": TerminalConfiguration.PSEUDO_DIFF,
}

class BaseChannel(ABC):
    """Base class for all analog input channel builders"""

    # Terminal configuration used when the section has no AI.TermCfg
    default_terminal_config = TerminalConfiguration.DEFAULT

    def __init__(self, spec: ChannelSpec):
        self.spec = spec
        self.physical_channel = spec.physical_channel

    @property
    def terminal_config(self) -> TerminalConfiguration:
        name = self.spec.auxiliary.get("terminal_config")
        if name is None:
            return self.default_terminal_config
        return TERMINAL_CONFIGS[name]

    @abstractmethod
    def configure_channel(self, task: nidaqmx.Task) -> None:
        """Add this channel to the task"""
        pass

    @property
    def channel_info(self) -> Dict[str, Any]:
        """Return channel information"""
        return {
            'measurement_type': self.spec.measurement_type.value,
            'physical_channel': self.physical_channel,
            'range': (self.spec.min_val, self.spec.max_val),
            **dict(self.spec.auxiliary),
        }
