"""City autocomplete models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CitySuggestion:
    name: str
    country: str
    lat: float
    lon: float
    state: str | None = None

    @property
    def label(self) -> str:
        """Composite stored in recent searches, e.g. "Paris, FR"."""
        return f"{self.name}, {self.country}"

    @property
    def display_name(self) -> str:
        if self.state:
            return f"{self.name}, {self.state}, {self.country}"
        return self.label
