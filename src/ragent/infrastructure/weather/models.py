"""Weather report data model."""

from dataclasses import asdict, dataclass


@dataclass
class WeatherReport:
    """Current conditions at a location."""

    location: str
    temperature: int  # degrees Celsius
    description: str
    humidity: int  # percent
    wind_speed: int  # km/h

    def to_dict(self) -> dict:
        return asdict(self)
