# page4u_mcp/main.py
import argparse
import logging
import sys

from page4u_mcp.config import load_settings
from page4u_mcp.mcp.server import mcp_server, tool_registry

TRANSPORTS = ("stdio", "sse", "streamable-http")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Page4U MCP server")
    parser.add_argument("--transport", choices=TRANSPORTS, default="stdio",
                        help="MCP transport to serve on (default: stdio)")
    args = parser.parse_args(argv)

    settings = load_settings()
    logging.basicConfig(
        stream=sys.stderr,
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    # IMPORTANT: importing the tools package runs every @register_tool.
    from page4u_mcp.mcp import tools as _tools  # noqa: F401

    if not settings.credential.is_configured:
        logging.warning("PAGE4U_API_KEY is not set; every tool call will fail until it is")
    logging.info("Page4U MCP starting (%s)", args.transport)
    logging.info("Tools: %s", ", ".join(tool_registry.keys()) or "(none)")
    mcp_server.run(transport=args.transport)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
