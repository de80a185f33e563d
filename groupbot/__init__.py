"""Self-contained features for a group chat bot: games, fortunes, scores and chat utilities."""

__version__ = "0.1.0"