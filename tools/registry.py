from __future__ import annotations

"""Tool registry used by the agent host.

Responsibilities:
1) Expose tool definitions (framework descriptors and Gemini declarations).
2) Route tool calls by name.
3) Return uniform JSON envelopes, including for unknown tools.
4) Provide input/output schemas for documentation.
"""

import json
import logging
from typing import Any, Iterable, Protocol

from google.genai import types

from tools.errors import ToolError
from tools.progress import ProgressSink


class ToolProtocol(Protocol):
    # Minimal contract every tool must implement.
    # Example tool classes: WeatherForecastTool, CurrencyConversionTool.
    name: str

    def tool_definition(self) -> dict[str, Any]:
        ...

    def declaration(self) -> types.FunctionDeclaration:
        ...

    def output_schema(self) -> dict[str, Any]:
        """Return JSON schema describing the tool output."""
        ...

    def execute(self, arguments: dict[str, Any], publish_to_client: ProgressSink | None = None) -> str:
        ...


class ToolRegistry:
    def __init__(self, tools: Iterable[ToolProtocol]) -> None:
        self._logger = logging.getLogger("tools.registry")
        # Map by tool name for O(1) lookup when the host dispatches a call.
        self._tools = {tool.name: tool for tool in tools}
        self._logger.info("ToolRegistry initialized with tools=%s", list(self._tools.keys()))

    @property
    def names(self) -> list[str]:
        return list(self._tools.keys())

    def get(self, name: str) -> ToolProtocol | None:
        return self._tools.get(name)

    def definitions(self) -> list[dict[str, Any]]:
        """Return host framework descriptors, one per tool."""
        return [tool.tool_definition() for tool in self._tools.values()]

    def build_tools(self) -> list[types.Tool]:
        """Convert python tools into Gemini declarations list.

        Gemini expects function declarations (name/schema/description), not python callables.
        """
        declarations = [tool.declaration() for tool in self._tools.values()]
        self._logger.debug("Built %s tool declarations", len(declarations))
        return [types.Tool(function_declarations=declarations)]

    def describe(self) -> dict[str, dict[str, Any]]:
        """Return tool input/output schemas for documentation or debugging.

        Output example:
            {
                "weather-forecast": {
                    "input_schema": {...},
                    "output_schema": {...},
                }
            }
        """
        description: dict[str, dict[str, Any]] = {}
        for name, tool in self._tools.items():
            description[name] = {
                "input_schema": tool.tool_definition()["function"]["parameters"],
                "output_schema": tool.output_schema(),
            }
        return description

    def execute(
        self,
        name: str,
        args: dict[str, Any],
        publish_to_client: ProgressSink | None = None,
    ) -> str:
        """Execute one tool call and return its JSON envelope.

        Success shape:
            {"data": {...}}
        Failure shape:
            {"error": {"message": "...", "details": null}}
        """
        tool = self._tools.get(name)
        if tool is None:
            self._logger.warning("Unknown tool requested: %s", name)
            return _error(f"Unknown tool: {name}")

        if not isinstance(args, dict):
            self._logger.warning("Rejected non-object arguments for %s: %r", name, type(args).__name__)
            return _error("Tool arguments must be a JSON object")

        try:
            result = tool.execute(args, publish_to_client=publish_to_client)
        except Exception as exc:
            # Keep the envelope contract even if a tool breaks it.
            self._logger.exception("Tool execution failed: %s", name)
            return _error(str(exc) or "Tool execution failed")

        self._logger.debug("Tool executed: %s", name)
        return result


def _error(message: str) -> str:
    return json.dumps({"error": ToolError(message=message).model_dump(mode="json")}, ensure_ascii=False)
