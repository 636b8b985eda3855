"""
GEMCHAT v1 — core.py
Turn engine behind the prompt.
- GeminiSession owns the API client and the conversation memory (open / send / close)
- GemCore.process() takes one raw line and returns a TurnResult, never raises for model errors
- History only grows on a successful exchange
"""
from __future__ import annotations

import time
from contextlib import nullcontext
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, ContextManager, Dict, List, Optional

from google import genai
from google.genai import types
from loguru import logger

from gemchat.config import cfg, GemConfig
from gemchat.intent import classify, Intent, COMMAND, FILE, CHAT, EXIT
from gemchat.tools import file_write, generated_filename, ToolResult


# ── Data structures ────────────────────────────────────────────────────────────

@dataclass
class TurnResult:
    """
    kind: exit | help | write | clear | history | file | chat
    """
    kind: str
    text: str = ""
    error: Optional[str] = None
    path: str = ""
    file_type: str = ""
    model: str = ""
    latency_ms: int = 0
    history: List[Dict] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


# ── Memory ─────────────────────────────────────────────────────────────────────

class Memory:
    def __init__(self, limit: int = 60):
        self._msgs: List[Dict] = []
        self.limit = limit

    def add(self, role: str, content: str):
        self._msgs.append({"role": role, "content": content})
        if len(self._msgs) > self.limit:
            self._msgs = self._msgs[-self.limit:]
            # a window must open on a user message
            while self._msgs and self._msgs[0]["role"] != "user":
                self._msgs.pop(0)

    def add_exchange(self, user: str, reply: str):
        self.add("user", user)
        self.add("model", reply)

    def get(self) -> List[Dict]:
        return list(self._msgs)

    def clear(self):
        self._msgs.clear()

    def __len__(self): return len(self._msgs)

    @property
    def turns(self): return sum(1 for m in self._msgs if m["role"] == "user")


def to_contents(messages: List[Dict]) -> List[types.Content]:
    return [
        types.Content(role=m["role"], parts=[types.Part(text=m["content"])])
        for m in messages
    ]


# ── Session ────────────────────────────────────────────────────────────────────

class GeminiSession:
    """One conversation with the hosted model for the life of the process."""

    def __init__(self, api_key: str, config: Optional[GemConfig] = None,
                 client_factory: Optional[Callable[..., Any]] = None):
        self.config = config or cfg
        self.memory = Memory(int(self.config.get("chat_history_limit", 60)))
        self._api_key = api_key
        self._client_factory = client_factory or genai.Client
        self._client = None

    @property
    def model(self) -> str:
        return self.config.get("model", "gemini-2.0-flash")

    @property
    def is_open(self) -> bool:
        return self._client is not None

    def open(self) -> "GeminiSession":
        if self._client is None:
            self._client = self._client_factory(api_key=self._api_key)
            logger.debug("session opened (model={})", self.model)
        return self

    def close(self):
        if self._client is not None:
            logger.debug("session closed after {} turns", self.memory.turns)
        self._client = None
        self.memory.clear()

    def __enter__(self): return self.open()
    def __exit__(self, *exc): self.close()

    def _generation_config(self) -> types.GenerateContentConfig:
        system = (self.config.get("system_prompt") or "").strip()
        return types.GenerateContentConfig(
            temperature=float(self.config.get("temperature", 0.7)),
            max_output_tokens=int(self.config.get("max_tokens", 8192)),
            system_instruction=system or None,
        )

    def send(self, text: str) -> str:
        """Send one user message with the prior history. Raises on API failure."""
        if self._client is None:
            raise RuntimeError("Session is not open.")
        msgs = self.memory.get() + [{"role": "user", "content": text}]
        resp = self._client.models.generate_content(
            model=self.model,
            contents=to_contents(msgs),
            config=self._generation_config(),
        )
        reply = resp.text or ""
        self.memory.add_exchange(text, reply)
        return reply


# ── GemCore ────────────────────────────────────────────────────────────────────

class GemCore:
    def __init__(self, session: GeminiSession, workspace: Optional[Path] = None):
        self.session = session
        self.workspace = Path(workspace) if workspace else None

    def _ask(self, kind: str, line: str, waiting) -> TurnResult:
        t0 = time.perf_counter()
        try:
            with waiting():
                reply = self.session.send(line)
        except Exception as exc:
            logger.debug("{} turn failed: {}: {}", kind, type(exc).__name__, exc)
            return TurnResult(kind=kind, error=str(exc) or type(exc).__name__,
                              model=self.session.model)
        latency = int((time.perf_counter() - t0) * 1000)
        logger.debug("{} turn answered in {}ms", kind, latency)
        return TurnResult(kind=kind, text=reply, model=self.session.model,
                          latency_ms=latency)

    def _command(self, intent: Intent) -> TurnResult:
        if intent.command == "help":
            return TurnResult(kind="help")
        if intent.command == "clear":
            self.session.memory.clear()
            return TurnResult(kind="clear")
        if intent.command == "history":
            return TurnResult(kind="history", history=self.session.memory.get())
        # write
        if not intent.filename or not intent.content:
            return TurnResult(kind="write", error="Usage: /write <filename> <content>")
        res: ToolResult = file_write(intent.filename, intent.content, self.workspace)
        if not res.success:
            return TurnResult(kind="write", error=res.error, path=intent.filename)
        return TurnResult(kind="write", text=intent.content, path=res.metadata["path"])

    def _create_file(self, line: str, file_type: str, waiting) -> TurnResult:
        turn = self._ask("file", line, waiting)
        turn.file_type = file_type
        if not turn.ok:
            return turn
        name = generated_filename(file_type)
        res = file_write(name, turn.text, self.workspace)
        if not res.success:
            turn.error = res.error
            turn.path = name
            return turn
        turn.path = res.metadata["path"]
        return turn

    def process(self, line: str,
                waiting: Optional[Callable[[], ContextManager]] = None) -> TurnResult:
        """Handle one prompt line. `waiting` wraps the model round trip (spinner)."""
        waiting = waiting or nullcontext
        intent = classify(line)
        logger.debug("intent={} command={} file_type={}",
                     intent.kind, intent.command, intent.file_type)
        if intent.kind == EXIT:
            return TurnResult(kind="exit")
        if intent.kind == COMMAND:
            return self._command(intent)
        if intent.kind == FILE:
            return self._create_file(line, intent.file_type, waiting)
        return self._ask(CHAT, line, waiting)
