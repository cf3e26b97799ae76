from __future__ import annotations

"""Shared invocation pipeline for tool plugins.

Every tool runs the same flow:
1) Validate arguments into an immutable request model.
2) Fetch provider data and normalize it (tool-specific `run`).
3) Serialize the result as `{"data": ...}`.
4) Map any failure to `{"error": {"message": ..., "details": ...}}`.

Subclasses only describe their arguments and implement `run`.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from google.genai import types
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from tools.errors import ToolError, ToolFailure, ValidationError
from tools.progress import ProgressReporter, ProgressSink


class ToolPlugin(ABC):
    """Base class for tools loaded by the agent host."""

    name: str
    description: str
    logger_name = "tools"
    fallback_message = "Tool execution failed"
    request_model: type[BaseModel]
    result_model: type[BaseModel]

    def __init__(self) -> None:
        self._logger = logging.getLogger(self.logger_name)

    @abstractmethod
    def parameters_schema(self) -> dict[str, Any]:
        """Return the JSON schema of the tool arguments."""

    @abstractmethod
    def run(self, request: Any, progress: ProgressReporter) -> BaseModel:
        """Fetch and normalize data for a validated request."""

    def tool_definition(self) -> dict[str, Any]:
        """Return the host framework descriptor for this tool."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "strict": True,
                "parameters": self.parameters_schema(),
            },
        }

    def declaration(self) -> types.FunctionDeclaration:
        # Same schema, in the shape Gemini expects.
        return types.FunctionDeclaration(
            name=self.name,
            description=self.description,
            parameters_json_schema=self.parameters_schema(),
        )

    def output_schema(self) -> dict[str, Any]:
        return self.result_model.model_json_schema(by_alias=True)

    def validate(self, arguments: dict[str, Any]) -> Any:
        """Build the request model or fail fast with `ValidationError`."""
        try:
            return self.request_model.model_validate(arguments)
        except PydanticValidationError as exc:
            raise ValidationError(_describe_validation_error(exc)) from exc

    def execute(self, arguments: dict[str, Any], publish_to_client: ProgressSink | None = None) -> str:
        """Run one invocation and return the JSON envelope.

        `arguments` is the raw argument object sent by the host.
        Never raises: every failure is returned as an error payload.
        """
        progress = ProgressReporter(publish_to_client, tool_name=self.name)
        self._logger.info("%s.execute called: arguments=%s", self.name, arguments)

        try:
            request = self.validate(arguments)
            result = self.run(request, progress)
        except ToolFailure as exc:
            self._logger.warning("%s failed: kind=%s message=%s", self.name, exc.kind, exc.message)
            return self._error_envelope(exc)
        except Exception as exc:
            self._logger.exception("%s failed with unexpected error", self.name)
            return self._error_envelope(exc)

        self._logger.debug("%s completed: last_progress=%s", self.name, progress.last_checkpoint)
        return json.dumps({"data": result.model_dump(mode="json", by_alias=True)}, ensure_ascii=False)

    def _error_envelope(self, exc: BaseException) -> str:
        error = ToolError.from_exception(exc, self.fallback_message)
        return json.dumps({"error": error.model_dump(mode="json")}, ensure_ascii=False)


def _describe_validation_error(exc: PydanticValidationError) -> str:
    """Turn the first pydantic error into a short message naming the field."""
    error = exc.errors()[0]
    field = str(error["loc"][0]) if error["loc"] else "arguments"
    if error["type"] == "missing":
        return f"Missing required field: {field}"
    if error["type"] == "extra_forbidden":
        return f"Unexpected argument: {field}"
    return f"Invalid value for {field}: {error['msg']}"
