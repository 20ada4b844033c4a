"""Abstract base class for agent plugins."""

from abc import ABC, abstractmethod

from .models import PluginContext, PluginFailure, PluginOutcome


class Plugin(ABC):
    """
    A tool the agent runs when a message looks relevant to it.

    Subclasses set ``name``, ``description`` and ``triggers`` and implement
    trigger detection, execution and prompt formatting.
    """

    name: str = ""
    description: str = ""
    triggers: tuple[str, ...] = ()

    @abstractmethod
    def should_trigger(self, message: str) -> bool:
        """Return True if the plugin should run for this message."""
        pass

    @abstractmethod
    async def execute(self, context: PluginContext) -> PluginOutcome:
        """
        Run the plugin.

        Expected failures are returned as PluginFailure rather than raised.
        """
        pass

    @abstractmethod
    def format_success(self, outcome: PluginOutcome) -> str:
        """Render a successful outcome as prompt text."""
        pass

    def format_outcome(self, outcome: PluginOutcome) -> str:
        if isinstance(outcome, PluginFailure):
            return f"{outcome.plugin_name} plugin failed: {outcome.error}"
        return self.format_success(outcome)

    def examples(self) -> list[str]:
        """Example messages that trigger the plugin."""
        return []

    def describe(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "triggers": list(self.triggers),
        }
