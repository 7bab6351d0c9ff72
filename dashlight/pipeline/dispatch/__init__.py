from .dispatcher import PromptDispatcher
from .types import DispatcherConfig, PromptEnvelope, InferenceOutcome, Success, Failure

__all__ = [
    "PromptDispatcher",
    "DispatcherConfig",
    "PromptEnvelope",
    "InferenceOutcome",
    "Success",
    "Failure",
]
