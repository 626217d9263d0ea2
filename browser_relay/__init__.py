# Browser Relay - Local console log relay
"""
Browser Relay stores console logs captured by the browser extension
and makes them available to:
- the HTTP API (ingestion, query, clear, live stream)
- the MCP server (AI assistant tool calls)
"""

__version__ = "1.0.0"
