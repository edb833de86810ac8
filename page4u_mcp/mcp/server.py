"""MCP Server definition and tool registration"""
import functools
import inspect
import logging
from typing import Annotated, Any, Dict, Optional, Tuple, get_args, get_origin

import anyio
import pydantic
from mcp.server.fastmcp import FastMCP
from mcp.types import TextContent
from pydantic.fields import FieldInfo

from page4u_mcp.errors import Page4UError, ValidationError

logger = logging.getLogger(__name__)


def parse_docstring(func):
    """Split a Google-style docstring into the tool summary and per-argument text."""
    docstring = inspect.getdoc(func)
    if not docstring:
        return "No description available.", {}

    summary = []
    arg_descriptions = {}
    args_section = False
    current = None

    for line in docstring.split('\n'):
        stripped = line.strip()
        indent = len(line) - len(line.lstrip())
        if stripped.lower() in ('args:', 'parameters:'):
            args_section = True
            continue
        if not args_section:
            summary.append(stripped)
            continue
        if not stripped:
            continue
        if indent == 0:
            # "Returns:" or any other top-level section ends the argument list
            break
        if indent <= 4 and ':' in stripped:
            arg_name, arg_desc = stripped.split(':', 1)
            current = arg_name.split('(')[0].strip()
            arg_descriptions[current] = arg_desc.strip()
        elif current:
            arg_descriptions[current] += " " + stripped

    description = "\n".join(summary).strip() or "No description available."
    return description, arg_descriptions


def _has_description(annotation) -> bool:
    if get_origin(annotation) is not Annotated:
        return False
    return any(isinstance(m, FieldInfo) and m.description for m in get_args(annotation)[1:])


def build_signature(func, arg_descriptions) -> inspect.Signature:
    """Return ``func``'s signature with docstring descriptions folded into the annotations."""
    params = []
    for param in inspect.signature(func).parameters.values():
        annotation = Any if param.annotation is inspect.Parameter.empty else param.annotation
        desc = arg_descriptions.get(param.name)
        if desc and not _has_description(annotation):
            annotation = Annotated[annotation, pydantic.Field(description=desc)]
        params.append(param.replace(annotation=annotation))
    return inspect.Signature(params, return_annotation=str)


def create_model_from_func(func, signature: inspect.Signature):
    """Creates a Pydantic model from a function's (described) signature."""
    fields = {}
    for param in signature.parameters.values():
        default = ... if param.default is inspect.Parameter.empty else param.default
        fields[param.name] = (param.annotation, default)

    return pydantic.create_model(
        f"{func.__name__}Schema",
        __config__=pydantic.ConfigDict(extra="forbid", populate_by_name=True),
        **fields,
    )


def validate_arguments(schema, arguments: Dict[str, Any]) -> Dict[str, Any]:
    """Validate raw tool arguments, keeping only the ones the caller actually supplied."""
    try:
        model = schema.model_validate(arguments)
    except pydantic.ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(part) for part in err["loc"]) or "arguments"
        raise ValidationError(field, err["msg"]) from e
    return {name: getattr(model, name) for name in model.model_fields_set}


def _collect_arguments(signature: inspect.Signature, args: Tuple, kwargs: Dict[str, Any]) -> Dict[str, Any]:
    arguments = {}
    if args:
        try:
            arguments.update(signature.bind_partial(*args).arguments)
        except TypeError as e:
            raise ValidationError("arguments", str(e)) from e
    arguments.update(kwargs)
    return arguments


class Page4UServer(FastMCP):
    """FastMCP server whose registered tools validate their own raw arguments.

    FastMCP would otherwise validate against its signature model first, fill in
    every default, and raise its own error before the tool sees the call.
    """

    async def list_tools(self):
        listed = await super().list_tools()
        return [
            tool.model_copy(update={"inputSchema": tool_registry[tool.name]["schema"].model_json_schema(by_alias=True)})
            if tool.name in tool_registry else tool
            for tool in listed
        ]

    async def call_tool(self, name, arguments):
        entry = tool_registry.get(name)
        if entry is None:
            return await super().call_tool(name, arguments)
        text = await entry["adapter"](**(arguments or {}))
        return [TextContent(type="text", text=text)]


mcp_server = Page4UServer(
    name="page4u",
    instructions=(
        "Manage Page4U landing pages: deploy HTML (with optional assets), "
        "update page details, read leads and analytics."
    ),
)

tool_registry = {}


def _make_entry_point(func, schema, signature):
    """Wrap a handler so it validates its input and always answers with text."""
    tool_name = func.__name__

    @functools.wraps(func)
    def run_tool(*args, **kwargs) -> str:
        try:
            values = validate_arguments(schema, _collect_arguments(signature, args, kwargs))
            logger.info(f"🔧 {tool_name} called with: {', '.join(sorted(values)) or '(no arguments)'}")
            return func(**values)
        except Page4UError as e:
            logger.error(f"❌ {tool_name}: {e}")
            return f"Error: {e}"
        except Exception as e:
            logger.error("%s: %s", tool_name, e, exc_info=True)
            return f"Error: {type(e).__name__}: {e}"

    run_tool.__signature__ = signature
    return run_tool


def _make_async_adapter(entry_point, signature):
    """FastMCP-facing coroutine; the blocking HTTP call runs on a worker thread."""

    @functools.wraps(entry_point)
    async def run_tool_async(*args, **kwargs) -> str:
        return await anyio.to_thread.run_sync(functools.partial(entry_point, *args, **kwargs))

    run_tool_async.__signature__ = signature
    return run_tool_async


def add_tool_to_registry(func):
    """
    Parses a function, generates its schema, and adds it to the global tool_registry.
    Returns the validating entry point that callers should use.
    """
    tool_name = func.__name__
    if tool_name in tool_registry:
        raise ValueError(f"Tool '{tool_name}' is already registered")

    description, arg_descriptions = parse_docstring(func)
    signature = build_signature(func, arg_descriptions)
    schema = create_model_from_func(func, signature)
    entry_point = _make_entry_point(func, schema, signature)
    adapter = _make_async_adapter(entry_point, signature)

    tool_registry[tool_name] = {
        "name": tool_name,
        "description": description,
        "schema": schema,
        "function": entry_point,
        "handler": func,
        "adapter": adapter,
    }

    mcp_server.add_tool(
        adapter,
        name=tool_name,
        description=description,
        structured_output=False,
    )
    logger.info(f"✅ Registered tool: '{tool_name}'")
    return entry_point


def register_tool(func):
    """A decorator that registers a function as a tool."""
    return add_tool_to_registry(func)


def invoke_tool(name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
    """Dispatch a tool call by name, the way an MCP client would."""
    entry = tool_registry.get(name)
    if entry is None:
        logger.error(f"❌ Unknown tool '{name}'")
        return f"Error: Unknown tool '{name}'"
    return entry["function"](**(arguments or {}))


# Export for other modules
__all__ = ['mcp_server', 'register_tool', 'tool_registry', 'invoke_tool']
