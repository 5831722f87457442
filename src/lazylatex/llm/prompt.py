"""Prompt assembly and response parsing for marker conversion."""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING

from lazylatex.errors import BackendError
from lazylatex.models.document import DocumentKind

if TYPE_CHECKING:
    from lazylatex.models.document import LineContext

SINGLE_SYSTEM_PROMPT = """
You are an assistant that converts informal or natural language math
(and possibly incorrect LaTeX) into a single valid LaTeX math expression.

Rules:
- Output ONLY the LaTeX math expression itself.
- Do NOT include surrounding $ or $$.
- Do NOT include backticks, explanations, or comments.
- Prefer concise, standard LaTeX math notation.
""".strip()

BATCH_SYSTEM_PROMPT = """
You are an assistant that converts several informal or natural language math
descriptions (and possibly incorrect LaTeX) into valid LaTeX math expressions.

Rules:
- Answer with a JSON array of strings and nothing else.
- The array has exactly one entry per numbered description, in the same order.
- Each entry is ONLY the LaTeX math expression, without surrounding $, $$,
  \\( \\), or \\[ \\].
- Use the surrounding document text to keep notation consistent.
- Do NOT include backticks, explanations, or comments.
""".strip()

_FREE_TEXT_SYSTEM_PROMPTS = {
    DocumentKind.LATEX: """
You are an assistant that writes LaTeX source to be inserted into a LaTeX
document at the position of an instruction.

Rules:
- Output ONLY the text to insert, as valid LaTeX source.
- Match the style and notation of the surrounding document.
- Do NOT wrap the output in code fences, and do NOT add explanations.
""".strip(),
    DocumentKind.MARKDOWN: """
You are an assistant that writes Markdown to be inserted into a Markdown
document at the position of an instruction. Math uses $...$ and $$...$$.

Rules:
- Output ONLY the text to insert, as valid Markdown.
- Match the style and notation of the surrounding document.
- Do NOT wrap the output in code fences, and do NOT add explanations.
""".strip(),
}

_FENCE_PATTERN = re.compile(r"^```[\w-]*[ \t]*\n(?P<body>.*?)\n?```$", re.DOTALL)


def _context_section(context: str) -> str:
    if not context.strip():
        return ""
    return f'Preceding lines of the document:\n"""\n{context}\n"""\n\n'


def build_single_prompt(text: str, context: str = "") -> str:
    """User prompt for converting one piece of selected text."""
    return (
        _context_section(context)
        + "Convert the following text into a single LaTeX math expression.\n\n"
        + f'Text:\n"""\n{text}\n"""'
    )


def build_batch_prompt(descriptions: list[str], context: LineContext) -> str:
    """User prompt for converting every math marker of a line in one call."""
    numbered = "\n".join(
        f"{index}. {description}"
        for index, description in enumerate(descriptions, start=1)
    )
    return (
        _context_section(context.previous)
        + f'Line containing the descriptions:\n"""\n{context.current}\n"""\n\n'
        + f"Convert each of these {len(descriptions)} descriptions into LaTeX:\n"
        + numbered
        + f"\n\nAnswer with a JSON array of exactly {len(descriptions)} strings."
    )


def free_text_system_prompt(kind: DocumentKind) -> str:
    """System prompt for free-text instructions in a document of ``kind``."""
    default = _FREE_TEXT_SYSTEM_PROMPTS[DocumentKind.LATEX]
    return _FREE_TEXT_SYSTEM_PROMPTS.get(kind, default)


def build_free_text_prompt(instruction: str, context: LineContext) -> str:
    """User prompt for one ``;;;;...;;;;`` instruction."""
    return (
        _context_section(context.previous)
        + f'Line containing the instruction:\n"""\n{context.current}\n"""\n\n'
        + f'Instruction:\n"""\n{instruction}\n"""'
    )


def strip_code_fences(text: str) -> str:
    """Remove one surrounding Markdown code fence, if the reply has one."""
    stripped = text.strip()
    match = _FENCE_PATTERN.match(stripped)
    if match:
        return match.group("body").strip()
    return stripped


def parse_batch_response(raw: str, expected: int) -> list[str]:
    """Parse the batch reply into exactly ``expected`` strings.

    ``null`` entries become ``""`` (meaning: leave that marker alone).

    Raises:
        BackendError: If the reply is not a JSON array of strings of the
            expected length.
    """
    body = strip_code_fences(raw)
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        msg = "LLM batch response was not valid JSON"
        raise BackendError(msg, body=raw) from exc

    if not isinstance(data, list):
        msg = "LLM batch response was not a JSON array"
        raise BackendError(msg, body=raw)
    if len(data) != expected:
        msg = f"LLM batch response had {len(data)} entries, expected {expected}"
        raise BackendError(msg, body=raw)

    results: list[str] = []
    for item in data:
        if item is None:
            results.append("")
        elif isinstance(item, str):
            results.append(item.strip())
        else:
            msg = f"LLM batch response contained a non-string entry: {item!r}"
            raise BackendError(msg, body=raw)
    return results
