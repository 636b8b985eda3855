"""
GEMCHAT v1 — render.py
Model reply → terminal.
  postprocess()  spaces code fences, rewrites ** / * emphasis as __ / _
  build_markdown()  rich Markdown configured from settings
"""
from __future__ import annotations

import re
from typing import List

from rich.markdown import Markdown

_FENCE_RE  = re.compile(r"^\s*(```|~~~)")
_INLINE_RE = re.compile(r"(`+)(.+?)\1")
_STRONG_EM_RE = re.compile(r"\*\*\*(?=\S)(.+?)(?<=\S)\*\*\*")
_BOLD_RE   = re.compile(r"\*\*(?=\S)(.+?)(?<=\S)\*\*")
_ITALIC_RE = re.compile(r"(?<![*\w])\*(?=[^\s*])(.+?)(?<=[^\s*])\*(?![*\w])")


def space_code_fences(text: str) -> str:
    """Blank line before every opening fence and after every closing fence."""
    out: List[str] = []
    fence = None
    for line in text.split("\n"):
        m = _FENCE_RE.match(line)
        if m and fence is None:
            fence = m.group(1)
            out.append("\n" + line)
        elif m and m.group(1) == fence and line.strip() == fence:
            fence = None
            out.append(line + "\n")
        else:
            out.append(line)
    return "\n".join(out)


def _rewrite_emphasis(segment: str) -> str:
    # longest marker first, otherwise shorter passes eat the pairs
    segment = _STRONG_EM_RE.sub(r"___\1___", segment)
    segment = _BOLD_RE.sub(r"__\1__", segment)
    return _ITALIC_RE.sub(r"_\1_", segment)


def _rewrite_outside_inline_code(line: str) -> str:
    parts: List[str] = []
    pos = 0
    for m in _INLINE_RE.finditer(line):
        parts.append(_rewrite_emphasis(line[pos:m.start()]))
        parts.append(m.group(0))
        pos = m.end()
    parts.append(_rewrite_emphasis(line[pos:]))
    return "".join(parts)


def rewrite_emphasis(text: str) -> str:
    """Emphasis rewrite outside fenced blocks and inline code spans."""
    out: List[str] = []
    fence = None
    for line in text.split("\n"):
        m = _FENCE_RE.match(line)
        if m and fence is None:
            fence = m.group(1); out.append(line); continue
        if fence is not None:
            if m and m.group(1) == fence and line.strip() == fence:
                fence = None
            out.append(line); continue
        out.append(_rewrite_outside_inline_code(line))
    return "\n".join(out)


def postprocess(text: str) -> str:
    return rewrite_emphasis(space_code_fences(text))


def build_markdown(text: str, code_theme: str = "monokai", hyperlinks: bool = True) -> Markdown:
    return Markdown(
        text,
        code_theme=code_theme,
        hyperlinks=hyperlinks,
        justify="left",
        inline_code_lexer="python",
    )


def render_reply(text: str, code_theme: str = "monokai", hyperlinks: bool = True) -> Markdown:
    return build_markdown(postprocess(text), code_theme=code_theme, hyperlinks=hyperlinks)
