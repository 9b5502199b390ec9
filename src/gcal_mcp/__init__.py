"""
Google Calendar MCP server backed by a bearer access token.
"""

__version__ = "0.1.0"
