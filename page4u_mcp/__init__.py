"""MCP server bridging AI assistants to the Page4U landing-page API"""

__version__ = "1.0.0"
