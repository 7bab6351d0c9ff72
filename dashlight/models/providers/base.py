from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Any, Optional, Tuple, Union

#unified model errors
class ModelError(RuntimeError): ...
class ModelTimeout(ModelError): ...

@dataclass(frozen=True)
class TextPart:
    text: str

@dataclass(frozen=True)
class InlineDataPart:
    mime_type: str #sniffed type, never the client-declared one
    data: bytes #raw bytes; the SDK base64-encodes them on the wire

ContentPart = Union[TextPart, InlineDataPart]

@dataclass(frozen=True)
class GenerateRequest:
    model: str
    parts: Tuple[ContentPart, ...] #sent as a single user turn, order preserved
    params: Dict[str, Any] | None = None

@dataclass(frozen=True)
class ModelResponse:
    content: Optional[str] #None when the backend produced no text
    raw: Any #provider-native response obj
    meta: Dict[str, Any] #latency, token counts, model, finish reason

class ModelProvider(ABC):
    @abstractmethod
    def generate(self, req: GenerateRequest) -> ModelResponse:
        raise NotImplementedError

    @abstractmethod
    def health_check(self) -> bool:
        raise NotImplementedError
