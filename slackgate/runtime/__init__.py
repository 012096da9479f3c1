"""Bot runtime -- Slack session lifecycle, access control, and dispatch."""
