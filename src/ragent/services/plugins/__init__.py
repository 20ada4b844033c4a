"""
Agent plugins: a router plus the math and weather tools.
"""

from .base import Plugin
from .math_plugin import (
    MathPlugin,
    evaluate_expression,
    extract_expression,
    sanitize_expression,
)
from .models import (
    MathOutcome,
    PluginContext,
    PluginFailure,
    PluginOutcome,
    WeatherOutcome,
)
from .router import PluginRouter
from .weather_plugin import WeatherPlugin, extract_location

__all__ = [
    "Plugin",
    "PluginRouter",
    "PluginContext",
    "PluginOutcome",
    "MathOutcome",
    "WeatherOutcome",
    "PluginFailure",
    "MathPlugin",
    "WeatherPlugin",
    "evaluate_expression",
    "extract_expression",
    "sanitize_expression",
    "extract_location",
]
