import pytest

from gemchat.intent import (
    CHAT, COMMAND, EXIT, FILE,
    classify, has_creation_keyword, has_file_word, is_file_creation,
    is_greeting, match_creation_template,
)


def test_create_python_file_is_file_creation() -> None:
    intent = classify("create a python file that prints hi")
    assert intent.kind == FILE
    assert intent.file_type == "python"


@pytest.mark.parametrize(
    ("line", "file_type"),
    [
        ("make an HTML file for a landing page", "html"),
        ("Generate a new css file with a dark theme", "css"),
        ("please write a json file listing three fruits", "json"),
        ("can you create the markdown file for the readme", "markdown"),
    ],
)
def test_creation_template_variants(line: str, file_type: str) -> None:
    intent = classify(line)
    assert intent.kind == FILE
    assert intent.file_type == file_type


@pytest.mark.parametrize(
    "line",
    [
        "hello, can you make a file",
        "hi create a python file",
        "Hey! generate a json file please",
        "good morning, write a text file about coffee",
        "create a python file for me, how are you?",
        "hello",
    ],
)
def test_greeting_wins_over_file_creation(line: str) -> None:
    assert classify(line).kind == CHAT


def test_file_language_without_a_type_falls_back_to_chat() -> None:
    assert is_file_creation("write this into a file")
    assert classify("write this into a file").kind == CHAT
    assert classify("make a new file").kind == CHAT


def test_plain_question_is_chat() -> None:
    assert classify("what is a file descriptor?").kind == CHAT
    assert classify("explain list comprehensions").kind == CHAT


def test_write_command_parses_filename_and_content() -> None:
    intent = classify("/write greeting.txt Hello World")
    assert intent.kind == COMMAND
    assert intent.command == "write"
    assert intent.filename == "greeting.txt"
    assert intent.content == "Hello World"


def test_write_command_keeps_inner_whitespace() -> None:
    intent = classify("/write notes.md first  line\nsecond line")
    assert intent.content == "first  line\nsecond line"


def test_write_command_without_content_is_still_a_command() -> None:
    intent = classify("/write only-a-name.txt")
    assert intent.kind == COMMAND
    assert intent.filename == "only-a-name.txt"
    assert intent.content == ""


def test_write_command_beats_file_creation_words() -> None:
    intent = classify("/write make.txt create a python file")
    assert intent.kind == COMMAND
    assert intent.filename == "make.txt"


def test_unknown_slash_word_is_chat() -> None:
    assert classify("/writer something").kind == CHAT


@pytest.mark.parametrize(("line", "command"), [("/help", "help"), ("/HELP", "help"),
                                               ("/clear", "clear"), ("/history", "history")])
def test_simple_commands(line: str, command: str) -> None:
    intent = classify(line)
    assert intent.is_command
    assert intent.command == command


@pytest.mark.parametrize("line", ["exit", "EXIT", "  Exit  ", "quit"])
def test_exit_keyword_any_case(line: str) -> None:
    assert classify(line).kind == EXIT


def test_sub_checks() -> None:
    assert has_file_word("Save it to a FILE")
    assert not has_file_word("save it somewhere")
    assert has_creation_keyword("Generate something")
    assert not has_creation_keyword("recreate the bug")
    assert is_greeting("Good evening")
    assert not is_greeting("hiking trails file")
    assert not is_greeting("make a script that prints hi")
    assert match_creation_template("write a go file") == "go"
    assert match_creation_template("write something to disk") is None
