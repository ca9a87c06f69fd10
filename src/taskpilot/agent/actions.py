"""Data structures for the model-to-executor action contract.

The model answers a task with ``{"actions": [...], "summary": "..."}``. Each
action is tagged by ``type``; known tags are validated strictly, unknown tags
are kept as ``UnknownAction`` so the executor can skip them with a warning.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class FileWriteAction(BaseModel):
    """Create or overwrite a file with the given content."""

    model_config = ConfigDict(frozen=True)

    type: Literal["file_write"] = "file_write"
    path: str = Field(min_length=1, description="File path, relative to the workspace root")
    content: str = Field(description="Exact file content")


class FileDeleteAction(BaseModel):
    """Delete a file if it exists."""

    model_config = ConfigDict(frozen=True)

    type: Literal["file_delete"] = "file_delete"
    path: str = Field(min_length=1, description="File path, relative to the workspace root")


class CommandAction(BaseModel):
    """Run a shell command in the workspace root."""

    model_config = ConfigDict(frozen=True)

    type: Literal["command"] = "command"
    cmd: str = Field(min_length=1, description="Shell command line")


class UnknownAction(BaseModel):
    """An action whose tag is not understood; never executed."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(default="", description="The unrecognized tag")
    raw: dict[str, Any] = Field(default_factory=dict, description="Original payload")


KnownAction = Annotated[
    FileWriteAction | FileDeleteAction | CommandAction,
    Field(discriminator="type"),
]
Action = FileWriteAction | FileDeleteAction | CommandAction | UnknownAction

KNOWN_ACTION_TYPES = ("file_write", "file_delete", "command")

_known_action_adapter: TypeAdapter[KnownAction] = TypeAdapter(KnownAction)


def decode_action(item: Any) -> Action:
    """Decode one raw action payload.

    Raises:
        pydantic.ValidationError: If a known tag carries an invalid payload
    """
    if isinstance(item, dict) and item.get("type") in KNOWN_ACTION_TYPES:
        return _known_action_adapter.validate_python(item)
    if isinstance(item, dict):
        return UnknownAction(type=str(item.get("type", "")), raw=item)
    return UnknownAction(raw={"value": item})


class TaskResult(BaseModel):
    """The parsed reply for a task run.

    Attributes:
        actions: Actions to execute, in order
        summary: What the model says it did
    """

    actions: list[Action]
    summary: str = ""

    @field_validator("actions", mode="before")
    @classmethod
    def _decode_actions(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        return [decode_action(item) for item in value]
