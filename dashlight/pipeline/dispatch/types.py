from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from ..errors import ErrorKind
from ..upload.types import ValidatedImage


@dataclass(frozen=True)
class DispatcherConfig:
    model: str
    instruction_text: str #rendered once at startup, never user-controlled
    params: Dict[str, Any] = field(default_factory=dict)
    prompt_ref: Optional[str] = None


@dataclass(frozen=True)
class PromptEnvelope:
    instruction_text: str
    user_text: Optional[str] = None
    image: Optional[ValidatedImage] = None

    @property
    def composed_text(self) -> str:
        if self.user_text:
            return f"{self.instruction_text}\n{self.user_text}"
        return self.instruction_text


@dataclass(frozen=True)
class Success:
    text: str
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str = ""


InferenceOutcome = Union[Success, Failure]
