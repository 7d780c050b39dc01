"""SlackRelay: Slack workspace chat bridge with live SSE relay."""

__version__ = "0.1.0"
