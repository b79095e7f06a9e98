from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from rich.text import Text

from .util import scan_lines

# Presentation tones, from lowest to highest precedence
TONE_NEUTRAL = "grey50"
TONE_WARNING = "yellow"
TONE_SUCCESS = "green"

KEY_STYLE = "green"
SEPARATOR_STYLE = "grey50"
VALUE_STYLE = "yellow"


@dataclass(frozen=True, slots=True)
class Unit:
    """One service unit as described by a ``systemctl show`` block."""

    properties: Mapping[str, str] = field(default_factory=dict)

    # Compared by value but never hashed; the mapping view is unhashable
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    @classmethod
    def from_block(cls, block: str) -> Unit:
        props: dict[str, str] = {}
        for line in scan_lines(block):
            key, sep, value = line.partition("=")
            if not sep:
                continue
            props[key] = value
        return cls(props)

    @property
    def name(self) -> str:
        return self.properties.get("Names", "")

    @property
    def active_state(self) -> str:
        return self.properties.get("ActiveState", "")

    @property
    def sub_state(self) -> str:
        return self.properties.get("SubState", "")

    @property
    def is_running(self) -> bool:
        return self.sub_state == "running"

    @property
    def tone(self) -> str:
        if self.active_state != "active":
            return TONE_NEUTRAL
        if self.sub_state == "running":
            return TONE_SUCCESS
        return TONE_WARNING

    def colorized(self) -> Text:
        return Text(self.name, style=self.tone, no_wrap=True)

    def properties_text(self) -> Text:
        """All properties as ``key=value`` lines sorted by key."""
        text = Text()
        for key in sorted(self.properties):
            text.append(key, style=KEY_STYLE)
            text.append("=", style=SEPARATOR_STYLE)
            text.append(self.properties[key], style=VALUE_STYLE)
            text.append("\n")
        return text


@dataclass(slots=True)
class AppOptions:
    filter: str = ""
    properties: str = ""
    user: bool = False
    journal_lines: int = 0
