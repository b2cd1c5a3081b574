"""Generation domain exports."""

from .generation_contracts import GenerationOutcome, GenerationRequest
from .markdown_generation_use_case import GenerationExecutionError, execute_markdown_generation

__all__ = [
    "GenerationRequest",
    "GenerationOutcome",
    "GenerationExecutionError",
    "execute_markdown_generation",
]
