"""Protocol data classes for WebSocket communication."""

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional, Literal
from enum import Enum

PROTOCOL_VERSION = "t1.0.0"


class MessageType(str, Enum):
    """WebSocket message types."""
    HELLO = "hello"
    RESET = "reset"
    COMMAND = "command"
    OBS = "obs"
    ERROR = "error"


@dataclass
class HelloRequest:
    """Client hello message."""
    type: Literal["hello"] = "hello"
    version: str = PROTOCOL_VERSION


@dataclass
class HelloResponse:
    """Server hello response."""
    type: Literal["hello"] = "hello"
    version: str = PROTOCOL_VERSION
    server: str = "tetris-engine-py"


@dataclass
class ResetRequest:
    """Request to start a new game."""
    seed: Optional[int] = None
    type: Literal["reset"] = "reset"

    def __post_init__(self):
        # bool is an int subclass but never a meaningful seed
        if self.seed is not None and (not isinstance(self.seed, int) or isinstance(self.seed, bool)):
            raise ValueError(f"seed must be an integer, got {self.seed!r}")


@dataclass
class CommandRequest:
    """Request to apply an input command."""
    action: str  # LEFT, RIGHT, DOWN, ROTATE, DROP, PAUSE, RESET
    type: Literal["command"] = "command"

    def __post_init__(self):
        if not isinstance(self.action, str):
            raise ValueError(f"action must be a string, got {self.action!r}")


@dataclass
class ObservationResponse:
    """Game snapshot pushed to the client."""
    data: Dict[str, Any]  # Snapshot dict from TetrisGame.snapshot().to_dict()
    done: bool
    info: Dict[str, Any] = field(default_factory=dict)
    type: Literal["obs"] = "obs"


@dataclass
class ErrorResponse:
    """Error response."""
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None
    type: Literal["error"] = "error"


class ErrorCode:
    """Standard error codes."""
    INVALID_MESSAGE = "INVALID_MESSAGE"
    GAME_NOT_INITIALIZED = "GAME_NOT_INITIALIZED"
    VERSION_MISMATCH = "VERSION_MISMATCH"


REQUEST_TYPES = {
    MessageType.HELLO: HelloRequest,
    MessageType.RESET: ResetRequest,
    MessageType.COMMAND: CommandRequest,
}


def parse_message(data: Any) -> Any:
    """Parse incoming WebSocket message.

    Args:
        data: JSON message dict

    Returns:
        Parsed message object

    Raises:
        ValueError: If the message is not an object, its type is unknown,
            or its fields do not match the type
    """
    if not isinstance(data, dict):
        raise ValueError("Message must be a JSON object")

    msg_type = data.get("type")
    try:
        request_cls = REQUEST_TYPES[MessageType(msg_type)]
    except ValueError:
        raise ValueError(f"Unknown message type: {msg_type}")
    except KeyError:
        raise ValueError(f"Unexpected message type from client: {msg_type}")

    try:
        return request_cls(**data)
    except TypeError as e:
        raise ValueError(f"Invalid {msg_type} message: {e}")


def to_dict(obj: Any) -> Dict[str, Any]:
    """Convert dataclass to dict for JSON serialization.

    Args:
        obj: Dataclass instance

    Returns:
        Dictionary representation
    """
    return asdict(obj)
