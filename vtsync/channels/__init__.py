"""Channel definition files: loading and validation."""

from .loader import ChannelFile, load_channel_file, load_channel_files
from .validator import ChannelDefinition, to_channel, validate_channel

__all__ = [
    # Loader
    "ChannelFile",
    "load_channel_file",
    "load_channel_files",
    # Validator
    "ChannelDefinition",
    "validate_channel",
    "to_channel",
]
