from typing import Annotated, Any, Callable, Dict, List, Literal, Optional, Type, TypeVar, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    TypeAdapter,
    ValidationError,
    model_serializer,
)

from .errors import (
    InvalidRoleError,
    MissingContentError,
    SchemaViolationError,
    StructuredContentError,
)

ROLES = ("developer", "system", "user", "assistant", "tool", "function")

T = TypeVar("T")


def _check_content(value: Any) -> Any:
    # No type tag on the wire: a string is text, an array is multi-part.
    if isinstance(value, (str, list)):
        return value
    raise SchemaViolationError(
        f"content must be a string or an array, got {type(value).__name__}"
    )


# Array elements are kept verbatim; multi-part layouts are not interpreted.
Content = Annotated[Union[str, List[Any]], BeforeValidator(_check_content)]


class WireModel(BaseModel):
    """Base for every payload exchanged with the chat-completions endpoint.

    Optional fields that were never provided are left out of the dump, while
    an explicit ``null`` read from a payload is written back. Decoding and
    re-encoding a payload therefore reproduces the same set of keys.
    """

    model_config = ConfigDict(extra="ignore")

    @model_serializer(mode="wrap")
    def serialize_wire(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        data = handler(self)
        for name, field in type(self).model_fields.items():
            if field.is_required() or name in self.model_fields_set:
                continue
            if name in data and data[name] is None:
                del data[name]
        return data


class OpenWireModel(WireModel):
    """A wire model that keeps unknown keys and re-emits them at the same level."""

    model_config = ConfigDict(extra="allow")

    @property
    def extra(self) -> Dict[str, Any]:
        """Unknown top-level keys, merged flat into the serialized object."""
        return self.__pydantic_extra__


class BaseMessage(WireModel):
    role: str
    content: Content

    def content_text(self) -> str:
        """Return the text content of the message.

        Raises MissingContentError when the message carries no content (an
        assistant turn that only calls tools), and StructuredContentError
        when the content is a multi-part array rather than plain text.
        """
        content = self.content
        if content is None:
            raise MissingContentError(f"{self.role} message has no content")
        if isinstance(content, list):
            raise StructuredContentError(
                f"{self.role} message content is an array of {len(content)} parts, not text"
            )
        return content


class DeveloperMessage(BaseMessage):
    role: Literal["developer"] = "developer"
    name: Optional[str] = None


class SystemMessage(BaseMessage):
    role: Literal["system"] = "system"
    name: Optional[str] = None


class UserMessage(BaseMessage):
    role: Literal["user"] = "user"
    name: Optional[str] = None


class AssistantMessage(BaseMessage, OpenWireModel):
    model_config = ConfigDict(extra="allow")

    role: Literal["assistant"] = "assistant"
    # None for turns that only carry tool/function calls
    content: Optional[Content] = None
    name: Optional[str] = None


class ToolMessage(BaseMessage):
    role: Literal["tool"] = "tool"
    tool_call_id: str


class FunctionMessage(BaseMessage):
    role: Literal["function"] = "function"
    name: str


Message = Annotated[
    Union[
        DeveloperMessage,
        SystemMessage,
        UserMessage,
        AssistantMessage,
        ToolMessage,
        FunctionMessage,
    ],
    Field(discriminator="role"),
]

_MESSAGE_TYPES: Dict[str, Type[BaseMessage]] = {
    "developer": DeveloperMessage,
    "system": SystemMessage,
    "user": UserMessage,
    "assistant": AssistantMessage,
    "tool": ToolMessage,
    "function": FunctionMessage,
}


def new_message(role: str, text: str, **fields: Any) -> BaseMessage:
    """Build a plain-text message for a role label.

    Extra keyword arguments are passed to the message type, e.g. ``name`` or
    ``tool_call_id``. Tool and function messages default their required
    identifier to an empty string when it is not given.
    """
    try:
        cls = _MESSAGE_TYPES[role]
    except KeyError:
        raise InvalidRoleError(role) from None
    if cls is ToolMessage:
        fields.setdefault("tool_call_id", "")
    elif cls is FunctionMessage:
        fields.setdefault("name", "")
    return cls(content=text, **fields)


class ChatRequest(OpenWireModel):
    model: str = Field(min_length=1)
    messages: List[Message]

    max_tokens: Optional[int] = Field(default=None, gt=0)
    max_completion_tokens: Optional[int] = Field(default=None, gt=0)
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    stream: Optional[bool] = None
    user: Optional[str] = None

    @classmethod
    def new(cls, model: str) -> "ChatRequest":
        return cls(model=model, messages=[])

    def with_message(self, role: str, text: str, **fields: Any) -> "ChatRequest":
        self.messages.append(new_message(role, text, **fields))
        return self

    def with_extra(self, key: str, value: Any) -> "ChatRequest":
        if key in type(self).model_fields:
            raise ValueError(f"{key!r} is a modeled field; set the attribute instead")
        self.extra[key] = value
        return self


class Usage(OpenWireModel):
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    # Vendor accounting breakdowns, passed through untouched
    prompt_tokens_details: Any = None
    completion_tokens_details: Any = None


class Choice(OpenWireModel):
    index: int
    message: Message
    # Opaque: providers add new values over time
    finish_reason: str
    logprobs: Any = None


class ChatResponse(OpenWireModel):
    id: str
    object: str
    created: int
    model: str
    choices: List[Choice]
    usage: Usage
    system_fingerprint: Optional[str] = None
    service_tier: Optional[str] = None


_MESSAGE_ADAPTER: TypeAdapter = TypeAdapter(Message)
_CONTENT_ADAPTER: TypeAdapter = TypeAdapter(Content)


def _validate(validate: Callable[[Any], T], data: Any) -> T:
    try:
        return validate(data)
    except ValidationError as e:
        raise SchemaViolationError(str(e)) from e


def parse_request(data: Any) -> ChatRequest:
    return _validate(ChatRequest.model_validate, data)


def parse_response(data: Any) -> ChatResponse:
    return _validate(ChatResponse.model_validate, data)


def parse_message(data: Any) -> BaseMessage:
    return _validate(_MESSAGE_ADAPTER.validate_python, data)


def parse_content(value: Any) -> Union[str, List[Any]]:
    return _validate(_CONTENT_ADAPTER.validate_python, value)
