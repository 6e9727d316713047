# Channel registry for dispatching measurement types to channel builders
from typing import Dict, List, Type
from channel_resolver import ChannelSpec, MeasurementType
from .base_channel import BaseChannel
from .voltage_chan import VoltageChannel
from .current_chan import CurrentChannel
from .accel_chan import AccelerometerChannel

class ChannelRegistry:
    """Registry for managing analog input channel builders"""

    _channels: Dict[MeasurementType, Type[BaseChannel]] = {
        MeasurementType.VOLTAGE: VoltageChannel,
        MeasurementType.CURRENT: CurrentChannel,
        MeasurementType.ACCELEROMETER: AccelerometerChannel,
    }

    @classmethod
    def get_channel_class(cls, measurement_type: MeasurementType) -> Type[BaseChannel]:
        """Get channel builder class by measurement type"""
        if measurement_type not in cls._channels:
            raise ValueError(f"Unknown measurement type: {measurement_type}")
        return cls._channels[measurement_type]

    @classmethod
    def create_channel(cls, spec: ChannelSpec) -> BaseChannel:
        """Create channel builder for a resolved channel spec"""
        channel_class = cls.get_channel_class(spec.measurement_type)
        return channel_class(spec)

    @classmethod
    def list_measurement_types(cls) -> List[MeasurementType]:
        """List all measurement types with a registered builder"""
        return list(cls._channels.keys())
