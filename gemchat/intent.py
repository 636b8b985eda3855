"""
GEMCHAT v1 — intent.py
Decides how a raw prompt line is handled:
  command        /write, /help, /clear, /history, exit
  file creation  "create a python file that ..." → model reply saved to disk
  chat           everything else
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

COMMAND = "command"
FILE    = "file"
CHAT    = "chat"
EXIT    = "exit"

EXIT_WORDS = ("exit", "quit")

CREATION_KEYWORDS = ("create", "make", "write", "generate")

GREETINGS = (
    "hi", "hello", "hey", "greetings",
    "good morning", "good afternoon", "good evening",
    "how are you", "what's up",
)

_WRITE_RE    = re.compile(r"^/write(?:\s+(\S+)(?:\s+([\s\S]+))?)?\s*$", re.I)
_SIMPLE_CMDS = {"/help": "help", "/clear": "clear", "/history": "history"}

_KEYWORD_RE  = re.compile(r"\b(?:" + "|".join(CREATION_KEYWORDS) + r")\b", re.I)
_TEMPLATE_RE = re.compile(
    r"\b(?:" + "|".join(CREATION_KEYWORDS) + r")\s+"
    r"(?:(?:a|an|the)\s+)?(?:new\s+)?"
    r"(?!(?:new|a|an|the)\b)([\w+#-]+)\s+file\b",
    re.I,
)


@dataclass
class Intent:
    kind: str
    command: str = ""        # help | write | clear | history
    filename: str = ""
    content: str = ""
    file_type: str = ""

    @property
    def is_command(self) -> bool: return self.kind == COMMAND


# ── Sub-checks ─────────────────────────────────────────────────────────────────

def has_file_word(line: str) -> bool:
    return "file" in line.lower()


def has_creation_keyword(line: str) -> bool:
    return _KEYWORD_RE.search(line) is not None


def is_greeting(line: str) -> bool:
    """
    Exact greeting, a line opening with one ("hello, make a file"),
    or one closing the line after punctuation ("..., how are you?").
    A plain trailing word like "prints hi" is not a greeting.
    """
    text = line.strip().lower()
    bare = text.rstrip(" ?!.")
    for g in GREETINGS:
        if bare == g:
            return True
        if re.match(re.escape(g) + r"\b", text):
            return True
        if re.search(r"[,;:.!?-]\s*" + re.escape(g) + r"$", bare):
            return True
    return False


def match_creation_template(line: str) -> Optional[str]:
    """(create|make|write|generate) [a] [new] <word> file → lowercase <word>."""
    m = _TEMPLATE_RE.search(line)
    return m.group(1).lower() if m else None


def is_file_creation(line: str) -> bool:
    return has_file_word(line) and has_creation_keyword(line) and not is_greeting(line)


# ── Classifier ─────────────────────────────────────────────────────────────────

def parse_command(line: str) -> Optional[Intent]:
    text = line.strip()
    low  = text.lower()
    if low in EXIT_WORDS:
        return Intent(kind=EXIT)
    if low in _SIMPLE_CMDS:
        return Intent(kind=COMMAND, command=_SIMPLE_CMDS[low])
    m = _WRITE_RE.match(text)
    if m:
        return Intent(kind=COMMAND, command="write",
                      filename=m.group(1) or "", content=m.group(2) or "")
    return None


def classify(line: str) -> Intent:
    cmd = parse_command(line)
    if cmd:
        return cmd
    if is_file_creation(line):
        file_type = match_creation_template(line)
        if file_type:
            return Intent(kind=FILE, file_type=file_type)
    return Intent(kind=CHAT)
