# IEPE accelerometer channel
import nidaqmx
from nidaqmx.constants import (
    AccelSensitivityUnits,
    AccelUnits,
    ExcitationSource,
    TerminalConfiguration,
)
from .base_channel import BaseChannel
import logging

logger = logging.getLogger(__name__)

class AccelerometerChannel(BaseChannel):
    """Accelerometer input in g with internal current excitation.

    Sensitivity is read from AI.Accel.Sensitivity in mV/g. IEPE inputs are
    pseudodifferential on most modules, so that is the default terminal mode.
    """

    default_terminal_config = TerminalConfiguration.PSEUDO_DIFF

    def configure_channel(self, task: nidaqmx.Task) -> None:
        task.ai_channels.add_ai_accel_chan(
            self.physical_channel,
            terminal_config=self.terminal_config,
            min_val=self.spec.min_val,
            max_val=self.spec.max_val,
            units=AccelUnits.G,
            sensitivity=float(self.spec.auxiliary["sensitivity"]),
            sensitivity_units=AccelSensitivityUnits.MILLIVOLTS_PER_G,
            current_excit_source=ExcitationSource.INTERNAL,
        )
        logger.info(
            f"Added accelerometer channel {self.physical_channel} "
            f"({self.spec.auxiliary['sensitivity']} mV/g)"
        )
