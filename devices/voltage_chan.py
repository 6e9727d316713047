# Analog input voltage channel
import nidaqmx
from nidaqmx.constants import VoltageUnits
from .base_channel import BaseChannel
import logging

logger = logging.getLogger(__name__)

class VoltageChannel(BaseChannel):
    """Analog input voltage measurement in volts"""

    def configure_channel(self, task: nidaqmx.Task) -> None:
        task.ai_channels.add_ai_voltage_chan(
            self.physical_channel,
            terminal_config=self.terminal_config,
            min_val=self.spec.min_val,
            max_val=self.spec.max_val,
            units=VoltageUnits.VOLTS,
        )
        logger.info(f"Added voltage channel {self.physical_channel} [{self.spec.min_val}, {self.spec.max_val}] V")
