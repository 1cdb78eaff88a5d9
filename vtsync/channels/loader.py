"""Channel definition loader - reads organization JSON files."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from vtsync.core.exceptions import ChannelDefinitionError, NoChannelsFoundError


@dataclass
class ChannelFile:
    """Channel definitions of one organization file."""

    filename: str
    organization: str
    entries: list[dict[str, Any]] = field(default_factory=list)


def load_channel_file(path: Path) -> ChannelFile:
    """
    Load one organization file.

    The organization name is the file name without its ``.json`` suffix and
    is stamped onto every entry.

    Raises:
        ChannelDefinitionError: File is unreadable or not a JSON list of objects
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ChannelDefinitionError(f"{path.name}: {e}") from e

    if not isinstance(data, list) or not all(isinstance(entry, dict) for entry in data):
        raise ChannelDefinitionError(f"{path.name}: expected a list of channel objects")

    organization = path.stem
    entries = [{**entry, "organization": organization} for entry in data]
    return ChannelFile(filename=path.name, organization=organization, entries=entries)


def load_channel_files(directory: Path | str) -> list[ChannelFile]:
    """
    Load every ``*.json`` organization file in ``directory``.

    Raises:
        ChannelDefinitionError: Directory missing or a file unreadable
        NoChannelsFoundError: No channel entries in any file
    """
    root = Path(directory)
    if not root.is_dir():
        raise ChannelDefinitionError(f"Channel directory not found: {root}")

    files = [load_channel_file(path) for path in sorted(root.glob("*.json"))]
    if not any(f.entries for f in files):
        raise NoChannelsFoundError("No channels found.")
    return files
