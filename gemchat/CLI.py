#!/usr/bin/env python3
"""
GEMCHAT v1 — Gemini in your terminal

  gemchat                 — start chatting in the current directory
  gemchat --setkey KEY    — save your Gemini API key to ~/.env
  gemchat --model NAME    — use another model for this run
  gemchat --set K=V       — save a setting (temperature, model, code_theme, ...)
  gemchat --debug         — verbose diagnostics on stderr
"""

import sys, shutil
from typing import Callable, Optional

import click
from loguru import logger
from rich.console import Console
from rich.panel   import Panel
from rich.text    import Text
from rich.table   import Table
from rich.rule    import Rule
from rich.align   import Align
from rich.syntax  import Syntax
from rich.markup  import escape
from rich          import box
from prompt_toolkit             import PromptSession
from prompt_toolkit.history     import InMemoryHistory
from prompt_toolkit.styles      import Style as PTStyle
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.auto_suggest   import AutoSuggestFromHistory

from gemchat                import __version__
from gemchat.config         import cfg, resolve_api_key, save_api_key, ConfigError, SETTABLE_KEYS
from gemchat.core           import GemCore, GeminiSession, TurnResult
from gemchat.logging_utils  import configure_logging
from gemchat.render         import render_reply

# ── Console & palette ──────────────────────────────────────────────────────────
console = Console(highlight=False)
VERSION = __version__

BLUE   = "#4285f4"
CYAN   = "#00d9ff"
VIOLET = "#a142f4"
PINK   = "#f472b6"
GREEN  = "#34a853"
YELLOW = "#fbbc04"
RED    = "#ea4335"
WHITE  = "#e8eaf6"
DIM    = "#5f6b7c"
GRAD   = [BLUE, "#5b7cf6", "#7a6ff5", VIOLET, "#c04fd8", PINK]

def W(): return shutil.get_terminal_size().columns
def gradient(text: str) -> Text:
    t = Text()
    for i, ch in enumerate(text):
        t.append(ch, style=f"bold {GRAD[i % len(GRAD)]}")
    return t
def ok(m):    console.print(f"  [{GREEN}]✔[/]  [{WHITE}]{m}[/]")
def warn(m):  console.print(f"  [{YELLOW}]⚠[/]  [{WHITE}]{m}[/]")
def err(m):   console.print(f"  [{RED}]✖[/]  [{RED}]{m}[/]")
def info(m):  console.print(f"  [{CYAN}]⬡[/]  [{DIM}]{m}[/]")


def show_banner(model: str, key_source: str):
    about = cfg.model_info(model).get("description", "")
    console.print()
    console.print(Align.center(gradient(f"✦  GEMCHAT  v{VERSION}  ✦")))
    console.print()
    body = (
        f"[{DIM}]  model        [/][bold {CYAN}]{escape(model)}[/]"
        + (f"  [{DIM}]{escape(about)}[/]" if about else "") + "\n"
        + f"[{DIM}]  key          [/][bold {GREEN}]✔  {escape(key_source)}[/]\n\n"
        + f"[{DIM}]  Type a message and press Enter. Type [/][bold {CYAN}]exit[/][{DIM}] to quit.[/]"
    )
    console.print(Align.center(Panel(
        body, border_style=BLUE, box=box.ROUNDED,
        padding=(0, 2), width=min(72, W()-4),
    )))
    hints = [
        ("/write <file> <text>", "save text"),
        ("/history", "conversation"),
        ("/clear", "forget"),
        ("/help", "all commands"),
    ]
    hs = "   ".join(f"[bold {CYAN}]{escape(c)}[/] [{DIM}]{d}[/]" for c, d in hints)
    console.print(Align.center(Text.from_markup(hs)))
    console.print()


# ── Commands ───────────────────────────────────────────────────────────────────

def cmd_help():
    console.print()
    t = Table(box=box.SIMPLE_HEAD, border_style=DIM, header_style=f"bold {CYAN}",
              show_edge=False, padding=(0,2))
    t.add_column("COMMAND", style=f"bold {CYAN}", min_width=26)
    t.add_column("DESCRIPTION", style=WHITE)
    rows = [
        ("── CHAT ──", ""),
        ("<anything>",                "Ask Gemini; the reply is rendered as markdown"),
        ("create a <type> file ...",  "Gemini writes it, saved as <type>_<timestamp><ext>"),
        ("── COMMANDS ──", ""),
        ("/write <file> <content>",   "Save content to <file> in the current directory"),
        ("/history",                  "Show this session's conversation"),
        ("/clear",                    "Forget the conversation so far"),
        ("/help",                     "This table"),
        ("exit / quit",               "Leave"),
    ]
    for cmd, desc in rows:
        if cmd.startswith("──"): t.add_row(f"[{DIM}]{cmd}[/]", "")
        else: t.add_row(escape(cmd), desc)
    console.print(t)
    console.print()


def cmd_history(turn: TurnResult):
    msgs = turn.history
    if not msgs:
        info("No conversation yet."); console.print(); return
    console.print()
    t = Table(box=box.SIMPLE_HEAD, border_style=DIM, header_style=f"bold {CYAN}",
              show_edge=False, padding=(0,2))
    t.add_column("WHO", style=f"bold {VIOLET}", min_width=6)
    t.add_column("MESSAGE", style=WHITE)
    for m in msgs[-20:]:
        text = m["content"].strip().replace("\n", " ↵ ")
        who = "you" if m["role"] == "user" else "gemini"
        t.add_row(who, escape(text[:120] + ("…" if len(text) > 120 else "")))
    console.print(t)
    info(f"{sum(1 for m in msgs if m['role'] == 'user')} turn(s) in memory")
    console.print()


# ── Turn rendering ─────────────────────────────────────────────────────────────

def render_turn(turn: TurnResult):
    if turn.kind == "help":
        cmd_help(); return
    if turn.kind == "history":
        cmd_history(turn); return
    if turn.kind == "clear":
        ok("Conversation cleared"); console.print(); return

    if not turn.ok:
        console.print(); err(f"Error: {escape(turn.error)}"); console.print(); return

    if turn.kind == "write":
        ok(f"Wrote [bold]{escape(turn.path)}[/]"); console.print(); return

    if turn.kind == "file":
        console.print()
        ok(f"Created [bold]{escape(turn.path)}[/]  [{DIM}]({escape(turn.file_type)})[/]")
        console.print(Syntax(
            turn.text, Syntax.guess_lexer(turn.path, turn.text),
            theme=cfg.get("code_theme", "monokai"), line_numbers=True,
        ))
        console.print(); return

    console.print()
    console.print(Rule(title=f"[bold {VIOLET}]Gemini ›[/]", style=DIM, align="left"))
    console.print(render_reply(
        turn.text,
        code_theme=cfg.get("code_theme", "monokai"),
        hyperlinks=bool(cfg.get("hyperlinks", True)),
    ))
    console.print(Text.from_markup(
        f"  [{DIM}]{turn.latency_ms}ms  ·  {escape(turn.model)}[/]"
    ))
    console.print()


def _thinking():
    return console.status(f"[{CYAN}]Gemini is thinking...[/]", spinner="dots")


# ── Prompt loop ────────────────────────────────────────────────────────────────

def _prompt_reader() -> Callable[[], str]:
    session = PromptSession(
        history=InMemoryHistory(), auto_suggest=AutoSuggestFromHistory(),
        style=PTStyle.from_dict({"":"#e8eaf6"}),
    )
    prompt_html = HTML('<ansigreen><b>You</b></ansigreen><ansigray> › </ansigray>')
    return lambda: session.prompt(prompt_html)


def chat_loop(core: GemCore, read: Optional[Callable[[], str]] = None) -> int:
    """Read, handle, render until exit or EOF. One turn at a time."""
    read = read or _prompt_reader()
    while True:
        try:
            raw = read()
        except KeyboardInterrupt:
            continue
        except EOFError:
            console.print(); ok("Goodbye!"); break

        line = (raw or "").strip()
        if not line: continue

        try:
            turn = core.process(line, waiting=_thinking)
        except KeyboardInterrupt:
            console.print(); warn("Cancelled, nothing was sent to memory"); console.print()
            continue
        if turn.kind == "exit":
            console.print(); console.print(f"  [bold {BLUE}]Goodbye![/]"); console.print()
            break
        if not turn.ok:
            logger.debug("{} turn failed: {}", turn.kind, turn.error)
        render_turn(turn)
    return 0


# ── Entry point ────────────────────────────────────────────────────────────────

@click.command(context_settings={"help_option_names":["--help"]})
@click.option("--version", is_flag=True, help="Show version.")
@click.option("--setkey",  default=None, metavar="KEY", help="Save Gemini API key to ~/.env and exit.")
@click.option("--model",   default=None, metavar="NAME", help="Model for this run (default from config).")
@click.option("--set", "settings", multiple=True, metavar="KEY=VALUE", help="Save a setting (e.g. temperature=0.3) and exit.")
@click.option("--no-banner", is_flag=True, default=False, help="Skip the startup banner.")
@click.option("--debug",   is_flag=True, default=False, help="Verbose logging on stderr.")
def main(version, setkey, model, settings, no_banner, debug):
    """GEMCHAT — interactive chat with Google Gemini.

    \b
    Inside the chat:
      you › explain python decorators
      you › create a python file that prints the first 10 primes
      you › /write notes.txt remember to rotate the key
    """
    configure_logging(debug=debug)
    if version:
        console.print(gradient(f"GEMCHAT v{VERSION}")); return
    if setkey:
        try:
            path = save_api_key(setkey)
        except ConfigError as e:
            err(escape(str(e))); sys.exit(1)
        ok(f"Key saved → {escape(str(path))}")
        info("Run [bold]gemchat[/] to start"); return
    if settings:
        for item in settings:
            key, sep, value = item.partition("=")
            key = key.strip()
            if not sep or key not in SETTABLE_KEYS:
                err(f"Unknown setting: {escape(item)}")
                info(f"Settable: {', '.join(SETTABLE_KEYS)}"); sys.exit(1)
            try:
                cfg.set(key, value.strip())
            except ValueError as e:
                err(escape(str(e))); sys.exit(1)
            ok(f"{key} = {escape(str(cfg.get(key)))}")
        info(f"Saved → {escape(str(cfg.path()))}"); return

    try:
        api_key, source = resolve_api_key()
    except ConfigError as e:
        console.print()
        err(escape(str(e)))
        console.print(); sys.exit(1)

    if model:
        cfg.override("model", model)

    session = GeminiSession(api_key, cfg)
    try:
        session.open()
    except Exception as e:
        err(f"Error initializing chat: {escape(str(e))}")
        sys.exit(1)

    try:
        if cfg.get("show_banner", True) and not no_banner:
            show_banner(session.model, source)
        code = chat_loop(GemCore(session))
    finally:
        session.close()
    sys.exit(code)


if __name__ == "__main__":
    main()
