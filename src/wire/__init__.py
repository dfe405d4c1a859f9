from .errors import (
    InvalidRoleError,
    MissingContentError,
    SchemaViolationError,
    StructuredContentError,
    WireError,
)
from .schemas import (
    ROLES,
    AssistantMessage,
    BaseMessage,
    ChatRequest,
    ChatResponse,
    Choice,
    Content,
    DeveloperMessage,
    FunctionMessage,
    Message,
    SystemMessage,
    ToolMessage,
    Usage,
    UserMessage,
    new_message,
    parse_content,
    parse_message,
    parse_request,
    parse_response,
)

__all__ = [
    "ROLES",
    "AssistantMessage",
    "BaseMessage",
    "ChatRequest",
    "ChatResponse",
    "Choice",
    "Content",
    "DeveloperMessage",
    "FunctionMessage",
    "InvalidRoleError",
    "Message",
    "MissingContentError",
    "SchemaViolationError",
    "StructuredContentError",
    "SystemMessage",
    "ToolMessage",
    "Usage",
    "UserMessage",
    "WireError",
    "new_message",
    "parse_content",
    "parse_message",
    "parse_request",
    "parse_response",
]
