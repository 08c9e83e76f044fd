"""Message types for the OpenRouter Responses API.
API Reference: https://openrouter.ai/docs/api/reference/responses/basic-usage
"""

from datetime import datetime
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator


class MessageRole(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class InputTextContent(BaseModel):
    type: Literal["input_text"] = "input_text"
    text: str


class InputMessage(BaseModel):
    type: Literal["message"] = "message"
    role: MessageRole
    content: list[InputTextContent] | str


class OutputTextContent(BaseModel):
    type: Literal["output_text", "text"] = "output_text"
    text: str
    annotations: list[Any] = Field(default_factory=list)


OutputContent = OutputTextContent | dict[str, Any] | str


class OutputMessage(BaseModel):
    type: Literal["message"] = "message"
    id: str | None = None
    role: Literal["assistant"] = "assistant"
    status: str | None = None
    content: list[OutputContent] | str | None = None


OutputItem = OutputMessage | dict[str, Any]


class TokenUsage(BaseModel):
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


class LLMResponse(BaseModel):
    id: str | None = None
    object: str = "response"
    model: str = ""
    status: str = "completed"
    output: list[OutputItem] = Field(default_factory=list)
    usage: TokenUsage | None = None
    error: dict[str, Any] | str | None = None
    timestamp: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="before")
    @classmethod
    def _normalize_payload(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)

        # chat-completions shape
        if "output" not in data and "choices" in data:
            output = []
            for choice in data.get("choices") or []:
                message = choice.get("message") if isinstance(choice, dict) else None
                content = (message or {}).get("content")
                if isinstance(content, str):
                    output.append({"type": "message", "role": "assistant", "content": content})
            data["output"] = output

        output = data.get("output")
        if output is None:
            data["output"] = []
        elif isinstance(output, dict):
            data["output"] = [output]
        elif isinstance(output, str):
            data["output"] = [{"type": "message", "role": "assistant", "content": output}]

        usage = data.get("usage")
        if isinstance(usage, dict) and "input_tokens" not in usage:
            data["usage"] = {
                "input_tokens": usage.get("prompt_tokens", 0) or 0,
                "output_tokens": usage.get("completion_tokens", 0) or 0,
                "total_tokens": usage.get("total_tokens", 0) or 0,
            }
        return data

    @property
    def text_content(self) -> str | None:
        """Text of the first assistant message."""
        for item in self.output:
            if isinstance(item, OutputMessage):
                content = item.content
            elif isinstance(item, dict) and item.get("type") == "message":
                content = item.get("content")
            else:
                continue

            if isinstance(content, str):
                return content
            for part in content or []:
                if isinstance(part, OutputTextContent):
                    return part.text
                if isinstance(part, str):
                    return part
                if isinstance(part, dict) and part.get("text"):
                    return part["text"]
        return None
