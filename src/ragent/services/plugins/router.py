"""
Plugin router.

Runs every plugin whose trigger matches the message, in registration order,
and isolates each plugin's failures from the others.
"""

import logging
from typing import Iterable, Optional

from .base import Plugin
from .models import PluginContext, PluginFailure, PluginOutcome

logger = logging.getLogger(__name__)


class PluginRouter:
    """Dispatches messages to registered plugins."""

    def __init__(self, plugins: Optional[Iterable[Plugin]] = None):
        self._plugins: list[Plugin] = []
        for plugin in plugins or ():
            self.register(plugin)

    def register(self, plugin: Plugin) -> None:
        """
        Add a plugin after those already registered.

        Raises:
            ValueError: If a plugin with the same name is registered
        """
        if self.get(plugin.name) is not None:
            raise ValueError(f"Plugin already registered: {plugin.name}")
        self._plugins.append(plugin)

    def get(self, name: str) -> Optional[Plugin]:
        for plugin in self._plugins:
            if plugin.name == name:
                return plugin
        return None

    def available_plugins(self) -> list[str]:
        return [plugin.name for plugin in self._plugins]

    async def run(self, context: PluginContext) -> list[PluginOutcome]:
        """Execute every triggered plugin and collect their outcomes."""
        outcomes: list[PluginOutcome] = []
        for plugin in self._plugins:
            if not self._triggers(plugin, context.user_message):
                continue
            logger.debug(f"Executing {plugin.name} plugin")
            outcomes.append(await self._execute(plugin, context))
        return outcomes

    def _triggers(self, plugin: Plugin, message: str) -> bool:
        """A trigger check that raises counts as not fired."""
        try:
            return bool(plugin.should_trigger(message))
        except Exception as e:
            logger.error(f"Plugin {plugin.name} trigger check raised: {e}", exc_info=True)
            return False

    async def _execute(self, plugin: Plugin, context: PluginContext) -> PluginOutcome:
        try:
            return await plugin.execute(context)
        except Exception as e:
            logger.error(f"Plugin {plugin.name} raised: {e}", exc_info=True)
            return PluginFailure(plugin_name=plugin.name, error=str(e) or type(e).__name__)

    def format_outcomes(self, outcomes: list[PluginOutcome]) -> str:
        """Render outcomes as a prompt section ("" when none fired)."""
        if not outcomes:
            return ""

        sections = []
        for outcome in outcomes:
            plugin = self.get(outcome.plugin_name)
            if plugin is not None:
                sections.append(self._format(plugin, outcome))
            elif isinstance(outcome, PluginFailure):
                sections.append(f"{outcome.plugin_name} plugin failed: {outcome.error}")
        return "--- Plugin Results ---\n" + "\n\n".join(sections)

    def _format(self, plugin: Plugin, outcome: PluginOutcome) -> str:
        try:
            return plugin.format_outcome(outcome)
        except Exception as e:
            logger.error(f"Plugin {plugin.name} could not format its result: {e}", exc_info=True)
            return f"{plugin.name} plugin failed: result could not be formatted"

    def capabilities_manifest(self) -> str:
        """Describe the registered plugins for the system prompt."""
        if not self._plugins:
            return "No plugins are available."

        lines = ["Available plugins:"]
        for index, plugin in enumerate(self._plugins, start=1):
            lines.append(f"{index}. {plugin.name.capitalize()} Plugin: {plugin.description}")
            lines.append(f"   - Triggers on: {', '.join(plugin.triggers)}")
            examples = plugin.examples()
            if examples:
                lines.append(f'   - Example: "{examples[0]}"')
        lines.append("")
        lines.append("These plugins will automatically activate when relevant queries are detected.")
        return "\n".join(lines)

    def describe(self) -> list[dict]:
        return [plugin.describe() for plugin in self._plugins]

    async def test_plugins(self) -> dict[str, bool]:
        """Run each plugin on its first example and report whether it succeeded."""
        status: dict[str, bool] = {}
        for plugin in self._plugins:
            examples = plugin.examples()
            if not examples:
                status[plugin.name] = True
                continue
            outcome = await self._execute(
                plugin, PluginContext(user_message=examples[0], session_id="plugin-test")
            )
            status[plugin.name] = outcome.success
        return status
