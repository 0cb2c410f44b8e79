# =============================================================================
# agent/errors.py  —  Failures that end an agent turn
# =============================================================================
#
# Unlike core/errors.py, nothing here is turned into text by the loop.
# These propagate to main.py, which exits with a non-zero status.  Only
# UnknownTool is also shown to the user there.
# =============================================================================


class AgentError(Exception):
    """Base class for agent-side failures."""


class UnknownTool(AgentError):
    """The model asked for a tool that was never discovered."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        super().__init__(
            f"Model requested unknown tool {name!r}; available: {', '.join(available) or 'none'}"
        )


class ModelError(AgentError):
    """The model service failed or returned something unusable."""
