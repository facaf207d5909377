"""Assistant tools: schemas, typed actions and the action executor.

The assistant model calls these tools (OpenAI function calling format) to
change content; parsed calls become typed actions that the executor
applies to one project.
"""

from .definitions import AVAILABLE_TOOLS, TOOL_SCHEMAS, ActionResult
from .actions import Action, ActionCategory, ACTION_MODELS, parse_action, parse_tool_calls
from .executor import ActionExecutor, ExecutionReport, partition

__all__ = [
    "AVAILABLE_TOOLS",
    "TOOL_SCHEMAS",
    "ActionResult",
    "Action",
    "ActionCategory",
    "ACTION_MODELS",
    "parse_action",
    "parse_tool_calls",
    "ActionExecutor",
    "ExecutionReport",
    "partition",
]
