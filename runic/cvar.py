"""Console variables: named numeric settings that remember when they change."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_DESCRIPTION = "We are under construction here! Pardon the mess!"


@dataclass
class CVar:
    """A named numeric setting.

    ``modified`` is set whenever the value is assigned through :meth:`set`
    and cleared again when the value is consumed through :meth:`read`.
    """

    name: str
    value: float = 0.0
    archive: bool = False
    description: str = DEFAULT_DESCRIPTION
    modified: bool = field(default=False, init=False, compare=False)

    def __post_init__(self) -> None:
        self.value = float(self.value)

    def read(self) -> float:
        """Return the value and mark it as seen."""
        self.modified = False
        return self.value

    def set(self, value: float) -> None:
        """Assign a new value and mark the variable as modified."""
        self.value = float(value)
        self.modified = True

    def describe(self) -> str:
        """Return the description followed by the current value."""
        return f"{self.description}\n Current Value: {self.value:f}"


@dataclass
class CVarDescriptor:
    """Everything needed to register a :class:`CVar`."""

    name: str = ""
    description: str = ""
    value: float = 0.0
    default_value: float = 0.0
    archivable: bool = False