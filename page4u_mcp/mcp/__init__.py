"""MCP server, tool registry and tool handlers"""
