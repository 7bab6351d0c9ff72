from __future__ import annotations
from typing import Any, Dict, Optional
import time
import logging
from os import getenv

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from .base import ModelProvider, GenerateRequest, ModelResponse, ModelError, ModelTimeout, TextPart, InlineDataPart

logger = logging.getLogger(__name__)


class GeminiProvider(ModelProvider):
    def __init__(self, api_key: Optional[str] = None, timeout: float = 60.0, **kwargs):
        api_key = api_key or getenv("GEMINI_API_KEY")
        if not api_key:
            raise ModelError("GEMINI_API_KEY is not set and no api_key was configured for the gemini provider")
        # HttpOptions.timeout is in milliseconds
        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
            **kwargs
        )
        self.timeout = timeout

    def _to_part(self, part) -> types.Part:
        if isinstance(part, TextPart):
            return types.Part.from_text(text=part.text)
        if isinstance(part, InlineDataPart):
            return types.Part.from_bytes(data=part.data, mime_type=part.mime_type)
        raise ModelError(f"Unsupported content part: {type(part).__name__}")

    def generate(self, req: GenerateRequest) -> ModelResponse:
        contents = [types.Content(role="user", parts=[self._to_part(p) for p in req.parts])]
        params = dict(req.params or {})
        config = types.GenerateContentConfig(**params) if params else None

        t0 = time.perf_counter()
        try:
            response = self.client.models.generate_content(
                model=req.model,
                contents=contents,
                config=config,
            )
        except genai_errors.APIError as e:
            raise ModelError(e.message or str(e)) from e
        except httpx.TimeoutException as e:
            raise ModelTimeout(f"Gemini timeout after {self.timeout}s: {e}") from e
        except Exception as e:
            raise ModelError(str(e)) from e
        dt = time.perf_counter() - t0

        meta: Dict[str, Any] = {"provider": "gemini", "model": req.model, "latency": dt}
        usage = getattr(response, "usage_metadata", None)
        if usage is not None:
            for key in ("prompt_token_count", "candidates_token_count", "total_token_count"):
                value = getattr(usage, key, None)
                if value is not None:
                    meta[key] = value
        candidates = getattr(response, "candidates", None) or []
        if candidates and getattr(candidates[0], "finish_reason", None) is not None:
            meta["finish_reason"] = str(candidates[0].finish_reason)

        return ModelResponse(content=response.text, raw=response, meta=meta)

    def health_check(self) -> bool:
        try:
            next(iter(self.client.models.list()), None)
            return True
        except Exception as e:
            logger.warning(f"Gemini health check failed: {e}")
            return False
