"""Conversational assistant over the business objects.

The tools work on whatever entities schema discovery finds; chat sessions
drive an OpenAI-compatible model through those tools.
"""

from .chat import ChatSession, ChatTurn
from .context import ActiveView, ActiveViewContext
from .errors import ConversionError, NotFoundError, ToolError, ToolValidationError
from .navigation import NavigationService, QueuedNavigationService
from .service import AssistantReply, generate_reply
from .tools import EntityTools, openai_tools, tool_prompt

__all__ = [
    "ActiveView",
    "ActiveViewContext",
    "AssistantReply",
    "ChatSession",
    "ChatTurn",
    "ConversionError",
    "EntityTools",
    "NavigationService",
    "NotFoundError",
    "QueuedNavigationService",
    "ToolError",
    "ToolValidationError",
    "generate_reply",
    "openai_tools",
    "tool_prompt",
]
