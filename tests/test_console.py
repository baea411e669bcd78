"""Tests for the prompt/output terminal."""

import pytest


def test_ask_shows_default_and_returns_it_on_empty_answer(terminal_factory):
    term = terminal_factory("")

    assert term.ask("Number of attempts", "6") == "6"
    assert term.output == "Number of attempts (default: 6): "


def test_ask_without_default_has_plain_prompt(terminal_factory):
    term = terminal_factory("hello")

    assert term.ask("Name") == "hello"
    assert term.output == "Name: "


def test_ask_strips_whitespace(terminal_factory):
    term = terminal_factory("  42  ")
    assert term.ask("Initial interval (ms)", "1000") == "42"


def test_yes_no_prompt_format(terminal_factory):
    term = terminal_factory("")

    assert term.ask_yes_no('Modify workflow "orders"?') is True
    assert term.output == 'Modify workflow "orders"? (y/n, default: yes): '


@pytest.mark.parametrize(
    "answer, expected",
    [
        ("y", True),
        ("Y", True),
        ("yes", True),
        ("YES", True),
        ("n", False),
        ("no", False),
        ("yep", False),
        ("sure", False),
    ],
)
def test_yes_no_normalization(terminal_factory, answer, expected):
    assert terminal_factory(answer).ask_yes_no("Continue?") is expected


def test_yes_no_default_no(terminal_factory):
    term = terminal_factory("")

    assert term.ask_yes_no("Continue?", default=False) is False
    assert "(y/n, default: no)" in term.output


def test_end_of_input_raises_eof(terminal_factory):
    term = terminal_factory()
    with pytest.raises(EOFError):
        term.ask("Number of attempts", "6")


def test_markup_in_text_is_printed_literally(terminal_factory):
    term = terminal_factory("y")

    term.ask_yes_no('Modify workflow "[bold]x[/bold]"?')
    term.say("[red]not a style[/red]")

    assert '"[bold]x[/bold]"' in term.output
    assert "[red]not a style[/red]\n" in term.output


def test_error_goes_to_error_stream(terminal_factory):
    term = terminal_factory()

    term.error("Error: workflows directory not found!")

    assert term.errors == "Error: workflows directory not found!\n"
    assert term.output == ""


def test_close_is_idempotent_and_blocks_prompts(terminal_factory):
    term = terminal_factory("6")
    with term:
        pass
    assert term.closed
    term.close()
    with pytest.raises(EOFError):
        term.ask("Number of attempts", "6")
