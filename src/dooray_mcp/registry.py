from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from types import ModuleType
from typing import (
    Annotated,
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Optional,
    Tuple,
    Type,
    get_origin,
    get_type_hints,
)

from mcp.types import CallToolResult, TextContent
from pydantic import BaseModel, Field, create_model
from pydantic_core import to_json

from .client import DoorayClient
from .errors import format_error
from .models import INPUT_CONFIG
from .observability import log_event

log = logging.getLogger("dooray_mcp.registry")


# --- Discovery helpers ----------------------------------------------------- #


def discover_tool_modules(
    package_name: str = "dooray_mcp.tools",
) -> List[ModuleType]:
    """Import all modules under the given tools package, skipping failures."""
    modules: List[ModuleType] = []
    base_pkg = importlib.import_module(package_name)

    for finder in pkgutil.iter_modules(base_pkg.__path__, base_pkg.__name__ + "."):
        name = finder.name
        try:
            module = importlib.import_module(name)
            modules.append(module)
        except Exception as exc:  # pragma: no cover - logged, not fatal
            log.error("Failed importing tool module %s: %s", name, exc)
            continue

    return modules


def iter_tool_functions(module: ModuleType) -> Iterable[Callable]:
    """Yield functions that satisfy the tool convention."""
    for _, func in inspect.getmembers(module, inspect.iscoroutinefunction):
        if func.__name__.startswith("_"):
            continue
        if func.__module__ != module.__name__:
            # Skip imported functions
            continue

        sig = inspect.signature(func)
        params = list(sig.parameters.values())
        if not params or params[0].name != "client":
            log.debug(
                "Skipping %s.%s: first parameter must be 'client'",
                module.__name__,
                func.__name__,
            )
            continue

        # Pydantic cannot build a schema for Type[...] parameters.
        if any(get_origin(p.annotation) is type for p in params[1:]):
            log.debug(
                "Skipping %s.%s: unsupported parameter annotation (Type[...] detected)",
                module.__name__,
                func.__name__,
            )
            continue

        yield func


def tool_name(func: Callable) -> str:
    """update_task -> update-task"""
    return func.__name__.replace("_", "-")


# --- Results --------------------------------------------------------------- #


def error_result(exc: BaseException) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=f"Error: {format_error(exc)}")],
        isError=True,
    )


def success_result(value: Any) -> CallToolResult:
    text = to_json(value, fallback=str, indent=2).decode()
    return CallToolResult(content=[TextContent(type="text", text=text)])


# --- Input models ---------------------------------------------------------- #


def input_model_for(func: Callable) -> Tuple[Type[BaseModel], Optional[str]]:
    """
    Return the model that validates a tool's flat arguments, and the name of
    the parameter that receives the whole model (None when the model's fields
    map one-to-one onto keyword parameters).

    A tool taking a single pydantic model (``data: TaskUpdateInput``) exposes
    that model's fields directly, so presence tracking via model_fields_set
    survives. Plain parameters are collected into a generated model.
    """
    hints = get_type_hints(func)
    params = list(inspect.signature(func).parameters.values())[1:]

    if len(params) == 1:
        ann = hints.get(params[0].name)
        if inspect.isclass(ann) and issubclass(ann, BaseModel):
            return ann, params[0].name

    fields: Dict[str, Any] = {}
    for param in params:
        ann = hints.get(param.name, Any)
        default = ... if param.default is inspect.Parameter.empty else param.default
        fields[param.name] = (ann, default)

    model = create_model(f"{func.__name__}_input", __config__=INPUT_CONFIG, **fields)
    return model, None


def _advertised_signature(model: Type[BaseModel]) -> inspect.Signature:
    """Keyword-only signature named by alias, used for the listed input schema."""
    params = []
    for name, field in model.model_fields.items():
        ann: Any = field.annotation
        if field.description:
            ann = Annotated[ann, Field(description=field.description)]
        if field.is_required():
            default: Any = inspect.Parameter.empty
        else:
            default = field.get_default(call_default_factory=True)
        params.append(
            inspect.Parameter(
                field.alias or name,
                inspect.Parameter.KEYWORD_ONLY,
                default=default,
                annotation=ann,
            )
        )
    return inspect.Signature(parameters=params, return_annotation=CallToolResult)


# --- Wrapping / registration ---------------------------------------------- #


def _wrap_tool(func: Callable, client_provider: Callable[[], DoorayClient]) -> Callable:
    """
    Return a wrapper that takes the raw tool arguments, validates them, injects
    the client and turns the outcome into a CallToolResult. Validation errors
    get the same "Error: ..." envelope as failures inside the tool.
    """
    model, whole_param = input_model_for(func)
    name = tool_name(func)

    async def wrapped(**arguments):
        try:
            parsed = model.model_validate(arguments)
            if whole_param:
                result = await func(client_provider(), parsed)
            else:
                kwargs = {field: getattr(parsed, field) for field in model.model_fields}
                result = await func(client_provider(), **kwargs)
        except Exception as exc:
            log_event(
                "tool_error",
                log,
                level=logging.WARNING,
                tool=name,
                error_type=type(exc).__name__,
            )
            return error_result(exc)
        return success_result(result)

    wrapped.__name__ = func.__name__
    wrapped.__doc__ = func.__doc__
    wrapped.__module__ = func.__module__
    wrapped.__signature__ = _advertised_signature(model)  # type: ignore[attr-defined]
    return wrapped


def register_discovered_tools(
    app,
    client_provider: Callable[[], DoorayClient] | DoorayClient,
    modules: List[ModuleType] | None = None,
) -> Dict[str, Callable]:
    """
    Register discovered tools on an app that exposes a .tool decorator.
    Returns the wrappers keyed by tool name.
    """
    if isinstance(client_provider, DoorayClient):
        _client = client_provider

        def client_provider():
            return _client

    if not hasattr(app, "tool"):
        raise TypeError("app must expose a 'tool' decorator")

    modules = modules or discover_tool_modules()
    handlers: Dict[str, Callable] = {}

    for module in modules:
        for func in iter_tool_functions(module):
            name = tool_name(func)
            if name in handlers:
                raise ValueError(f"Duplicate tool name detected: {name}")

            wrapped = _wrap_tool(func, client_provider)
            app.tool(name=name, structured_output=False)(wrapped)
            handlers[name] = wrapped
            log.info("Registered tool: %s (%s)", name, module.__name__)

    return handlers


__all__ = [
    "discover_tool_modules",
    "iter_tool_functions",
    "input_model_for",
    "register_discovered_tools",
    "tool_name",
    "error_result",
    "success_result",
]
