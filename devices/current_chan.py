# Analog input current channel
import nidaqmx
from nidaqmx.constants import CurrentShuntResistorLocation, CurrentUnits
from .base_channel import BaseChannel
import logging

logger = logging.getLogger(__name__)

SHUNT_LOCATIONS = {
    "Internal": CurrentShuntResistorLocation.INTERNAL,
    "External": CurrentShuntResistorLocation.EXTERNAL,
    "Let Driver Choose": CurrentShuntResistorLocation.LET_DRIVER_CHOOSE,
}

class CurrentChannel(BaseChannel):
    """Analog input current measurement in amps across a shunt resistor.

    The shunt location and value come from AI.CurrentShunt.Loc and
    AI.CurrentShunt.Resistance; the resistance is only used by the driver
    when the shunt is external.
    """

    @property
    def shunt_location(self) -> CurrentShuntResistorLocation:
        return SHUNT_LOCATIONS[self.spec.auxiliary["shunt_location"]]

    @property
    def shunt_resistance(self) -> float:
        return float(self.spec.auxiliary["shunt_resistance"])

    def configure_channel(self, task: nidaqmx.Task) -> None:
        task.ai_channels.add_ai_current_chan(
            self.physical_channel,
            terminal_config=self.terminal_config,
            min_val=self.spec.min_val,
            max_val=self.spec.max_val,
            units=CurrentUnits.AMPS,
            shunt_resistor_loc=self.shunt_location,
            ext_shunt_resistor_val=self.shunt_resistance,
        )
        logger.info(
            f"Added current channel {self.physical_channel} [{self.spec.min_val}, {self.spec.max_val}] A "
            f"(shunt {self.spec.auxiliary['shunt_location']}, {self.shunt_resistance} ohm)"
        )
