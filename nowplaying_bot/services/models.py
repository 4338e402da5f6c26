from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Track:
    name: str
    artists: Tuple[str, ...]

    @property
    def performer(self) -> str:
        return ", ".join(self.artists)

    @property
    def key(self) -> str:
        """Identity used for history deduplication."""
        return f"{self.name} - {self.performer}"

    @property
    def search_query(self) -> str:
        return f"{self.name} {self.performer}"
