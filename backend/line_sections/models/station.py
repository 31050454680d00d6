"""Station value type."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Station:
    """
    Station referenced by sections.

    Identity is the id alone: two stations with the same id are equal even if
    their display names differ. Stations are shared across lines and are never
    owned by a section.
    """

    id: int
    name: str | None = field(default=None, compare=False)

    def __repr__(self) -> str:
        """String representation of the station."""
        return f"<Station(id={self.id}, name={self.name})>"
