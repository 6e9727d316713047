from .base_channel import BaseChannel
from .channel_registry import ChannelRegistry

__all__ = ["BaseChannel", "ChannelRegistry"]
