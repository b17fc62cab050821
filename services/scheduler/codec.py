"""
JSON codec for the metadata persisted with every scheduled job.

The payload layout is shared with the job store and must stay stable:

    {
      "definition": {"name": "<task-definition-name>"},
      "deploymentProperties": {"<key>": "<value>"},
      "commandlineArguments": ["<arg>"],
      "cronExpression": "<cron-string>"
    }
"""

import json
from typing import Any, Dict, List

from pydantic import ValidationError

from .exceptions import DecodeError, EncodingError
from .models import ScheduleMetadata


def encode(metadata: ScheduleMetadata) -> str:
    """Serialize schedule metadata to its JSON payload."""
    payload: Dict[str, Any] = {
        "definition": {"name": metadata.task_definition_name},
        "deploymentProperties": dict(metadata.deployment_properties),
        "commandlineArguments": list(metadata.commandline_arguments),
    }
    if metadata.cron_expression is not None:
        payload["cronExpression"] = metadata.cron_expression

    try:
        return json.dumps(payload)
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Failed to encode schedule metadata: {e}") from e


def decode(payload: Any) -> ScheduleMetadata:
    """
    Parse a JSON payload back into schedule metadata.

    Missing or empty properties and arguments decode to empty containers.

    Raises:
        DecodeError: If the payload is not valid JSON or has no definition name
    """
    if not isinstance(payload, (str, bytes, bytearray)):
        raise DecodeError(f"Metadata payload must be a JSON string, got {type(payload).__name__}")

    try:
        root = json.loads(payload)
    except ValueError as e:
        raise DecodeError(f"Malformed metadata payload: {e}") from e

    if not isinstance(root, dict):
        raise DecodeError("Metadata payload must be a JSON object")

    definition = root.get("definition")
    name = definition.get("name") if isinstance(definition, dict) else None
    if not isinstance(name, str):
        raise DecodeError("Metadata payload has no definition.name")

    cron_expression = root.get("cronExpression")
    if cron_expression is not None and not isinstance(cron_expression, str):
        raise DecodeError("cronExpression must be a string")

    try:
        return ScheduleMetadata(
            task_definition_name=name,
            deployment_properties=_string_map(root.get("deploymentProperties")),
            commandline_arguments=_string_list(root.get("commandlineArguments")),
            cron_expression=cron_expression,
        )
    except ValidationError as e:
        raise DecodeError(f"Invalid metadata payload: {e}") from e


def _string_map(node: Any) -> Dict[str, str]:
    if not node:
        return {}
    if not isinstance(node, dict):
        raise DecodeError("deploymentProperties must be a JSON object")
    return {str(key): _as_string(value) for key, value in node.items()}


def _string_list(node: Any) -> List[str]:
    if not node:
        return []
    if not isinstance(node, list):
        raise DecodeError("commandlineArguments must be a JSON array")
    return [_as_string(value) for value in node]


def _as_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        raise DecodeError(f"Expected a scalar value, got {type(value).__name__}")
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)
