"""slackgate -- authorization-gated Slack message dispatcher."""

__version__ = "0.1.0"
