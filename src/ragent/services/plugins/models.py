"""
Plugin execution context and outcome variants.
"""

from dataclasses import dataclass
from typing import Union

from ragent.infrastructure.weather import WeatherReport


@dataclass(frozen=True)
class PluginContext:
    """Input handed to a plugin for one turn."""

    user_message: str
    session_id: str

    @property
    def query(self) -> str:
        return self.user_message


@dataclass(frozen=True)
class MathOutcome:
    """A successfully evaluated expression."""

    expression: str
    result: Union[int, float]
    plugin_name: str = "math"

    @property
    def success(self) -> bool:
        return True

    def to_dict(self) -> dict:
        return {
            "plugin_name": self.plugin_name,
            "success": True,
            "expression": self.expression,
            "result": self.result,
        }


@dataclass(frozen=True)
class WeatherOutcome:
    """Current conditions, either looked up or mocked."""

    report: WeatherReport
    mocked: bool = False
    plugin_name: str = "weather"

    @property
    def success(self) -> bool:
        return True

    def to_dict(self) -> dict:
        return {
            "plugin_name": self.plugin_name,
            "success": True,
            "report": self.report.to_dict(),
            "mocked": self.mocked,
        }


@dataclass(frozen=True)
class PluginFailure:
    """A plugin that fired but could not produce a result."""

    plugin_name: str
    error: str

    @property
    def success(self) -> bool:
        return False

    def to_dict(self) -> dict:
        return {"plugin_name": self.plugin_name, "success": False, "error": self.error}


PluginOutcome = Union[MathOutcome, WeatherOutcome, PluginFailure]
