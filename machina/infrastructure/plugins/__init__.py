from machina.infrastructure.plugins.component_source import (
    PluginAncestryRanker,
    PluginComponentSource,
    PluginRegistration,
)

__all__ = ["PluginAncestryRanker", "PluginComponentSource", "PluginRegistration"]
