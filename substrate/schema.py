"""
Substrate Response Schema

Every tool returns a ToolResponse. The same model is the wire contract
between the executor and its worker process: the worker serializes it
with to_envelope(), the executor rebuilds it with from_envelope().
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, Union

from mcp.types import TextContent
from pydantic import BaseModel, Field

from .config import SubstrateConfig, load_config
from .exceptions import EnvelopeFormatError
from .logs import LogReader


class TextPayload(BaseModel):
    """Plain text result."""
    type: Literal["text"] = "text"
    text: str = ""


class JsonPayload(BaseModel):
    """Structured result (a JSON object or array)."""
    type: Literal["json"] = "json"
    data: Any = None


class ToolResponse(BaseModel):
    """
    Result of one tool call: success with text or JSON content, or an error.

    Errors always carry text content holding the human readable message.
    """
    is_error: bool = False
    content: Union[TextPayload, JsonPayload] = Field(discriminator="type")

    @classmethod
    def text(cls, text: str) -> "ToolResponse":
        return cls(content=TextPayload(text=text))

    @classmethod
    def structured(cls, data: Union[dict, list]) -> "ToolResponse":
        return cls(content=JsonPayload(data=data))

    @classmethod
    def error(cls, message: str) -> "ToolResponse":
        return cls(is_error=True, content=TextPayload(text=message))

    @property
    def message(self) -> str:
        """The text body, or the JSON body encoded as text."""
        if isinstance(self.content, JsonPayload):
            return json.dumps(self.content.data, default=str)
        return self.content.text

    def to_envelope(self) -> dict:
        """Render the process wire shape: JSON payloads travel as text."""
        return {
            "isError": self.is_error,
            "content": [{"type": "text", "text": self.message}],
        }

    @classmethod
    def from_envelope(cls, data: Any) -> "ToolResponse":
        """
        Rebuild a response from a decoded worker envelope.

        Raises EnvelopeFormatError if required fields are missing.
        """
        if not isinstance(data, dict) or "isError" not in data or "content" not in data:
            raise EnvelopeFormatError()

        content = data["content"]
        if not isinstance(content, list) or not content or not isinstance(content[0], dict):
            raise EnvelopeFormatError()

        first = content[0]

        if data["isError"]:
            return cls.error(str(first.get("text") or "Unknown error"))

        text = first.get("text")
        if text is None:
            raise EnvelopeFormatError()
        text = str(text)

        try:
            decoded = json.loads(text)
        except json.JSONDecodeError:
            return cls.text(text)

        # Scalars like "42" stay text
        if isinstance(decoded, (dict, list)):
            return cls.structured(decoded)
        return cls.text(text)

    def to_text_content(self) -> list[TextContent]:
        """Convert to MCP content for the client."""
        if isinstance(self.content, JsonPayload):
            body = json.dumps(self.content.data, indent=2, default=str)
        else:
            body = self.content.text
        return [TextContent(type="text", text=body)]


@dataclass
class ToolContext:
    """
    Everything a tool is allowed to know about its surroundings.

    Passed explicitly into Tool.handle() so tools never reach for
    process-wide state.
    """
    project_root: Path
    config: SubstrateConfig = field(default_factory=SubstrateConfig)
    _logs: Optional[LogReader] = field(default=None, repr=False)

    @classmethod
    def for_project(cls, project_root: Path) -> "ToolContext":
        return cls(project_root=Path(project_root), config=load_config(project_root))

    @property
    def logs(self) -> LogReader:
        if self._logs is None:
            self._logs = LogReader(
                chunk_size_start=self.config.log_chunk_size_start,
                chunk_size_max=self.config.log_chunk_size_max,
            )
        return self._logs
