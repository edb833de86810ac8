import importlib
import logging
import pkgutil

logger = logging.getLogger(__name__)

# Import every module in this directory so that functions decorated with
# @register_tool are added to the mcp_server instance. Logs go to stderr:
# stdout carries the MCP stdio stream.
logger.debug("--- [MCP] Discovering and loading tools ---")
for _, name, _ in pkgutil.iter_modules(__path__):
    importlib.import_module(f".{name}", __package__)
    logger.debug(f"  -> [MCP] Loaded tools from: {name}.py")
logger.debug("--- [MCP] Tool loading complete ---")
