"""modules/tool_usage package — external data collaborators (event catalog)."""
