"""Parameter models, one per method.

The dispatcher validates raw ``params`` against these before a handler runs,
and each tool's ``inputSchema`` is generated from its model.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from viewctl.capabilities.provider import ModifierKey, MouseButton


class EmptyParams(BaseModel):
    """For methods that take no parameters; unknown keys are ignored."""


class MoveParams(BaseModel):
    x: float = Field(..., description="Target X coordinate")
    y: float = Field(..., description="Target Y coordinate")


class ClickParams(BaseModel):
    button: MouseButton = Field(default="left", description="Mouse button to click")
    double: bool = Field(default=False, description="Double-click instead of a single click")


class DragParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_x: float = Field(..., alias="startX", description="Start X coordinate")
    start_y: float = Field(..., alias="startY", description="Start Y coordinate")
    end_x: float = Field(..., alias="endX", description="End X coordinate")
    end_y: float = Field(..., alias="endY", description="End Y coordinate")
    button: MouseButton = Field(default="left", description="Mouse button held during the drag")


class TypeTextParams(BaseModel):
    text: str = Field(..., description="Text to type")


class PressKeyParams(BaseModel):
    key: str = Field(..., description="Key to press")
    modifiers: list[ModifierKey] = Field(
        default_factory=list,
        description="Modifier keys held while pressing",
    )


class HoldKeyParams(BaseModel):
    key: str = Field(..., description="Key to hold or release")
    down: bool = Field(..., description="true to hold the key down, false to release it")


class ShortcutParams(BaseModel):
    keys: list[str] = Field(
        ...,
        min_length=1,
        description="Keys to press together; the last one is the main key, the rest are modifiers",
    )


class SavePathParams(BaseModel):
    path: str = Field(
        default="",
        description="Destination file path; defaults to a timestamped file in the working directory",
    )


class ToolCallParams(BaseModel):
    name: str
    arguments: dict[str, Any] | None = None


class InitializeParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    protocol_version: str | None = Field(default=None, alias="protocolVersion")
    capabilities: dict[str, Any] = Field(default_factory=dict)
    client_info: dict[str, Any] = Field(default_factory=dict, alias="clientInfo")


def input_schema(model: type[BaseModel]) -> dict[str, Any]:
    """JSON schema for *model* in the shape ``tools/list`` advertises."""
    schema = model.model_json_schema(by_alias=True)
    schema.pop("title", None)
    schema.setdefault("properties", {})
    return schema
