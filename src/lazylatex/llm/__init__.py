"""Text-generation backends and the conversion requests built on them."""

from lazylatex.llm.factory import get_backend
from lazylatex.llm.generate import (
    generate_anything_from_instruction,
    generate_latex_for_batch,
    generate_latex_from_text,
)
from lazylatex.llm.protocol import TextGenerationBackend

__all__ = [
    "TextGenerationBackend",
    "generate_anything_from_instruction",
    "generate_latex_for_batch",
    "generate_latex_from_text",
    "get_backend",
]
