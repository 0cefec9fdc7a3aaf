"""Tests for REPL input parsing."""

# Path setup handled by conftest.py
from questboard.repl.parser import parse_command


def test_quoted_title_and_short_flags():
    result = parse_command('add "Ship v2" -x L --status todo -P 1')
    assert result.command == "add"
    assert result.args == ["Ship v2"]
    assert result.flags == {"difficulty": "L", "status": "todo", "priority": "1"}
    print("✓ Quoted args and short flags")


def test_unquoted_words_stay_positional():
    result = parse_command("add Buy some milk -p Home")
    assert result.args == ["Buy", "some", "milk"]
    assert result.flag_str("project") == "Home"


def test_boolean_flags():
    result = parse_command("reset --yes")
    assert result.flags == {"yes": True}
    assert result.flag_str("yes") is None

    result = parse_command("rm 3f2a -y")
    assert result.args == ["3f2a"]
    assert result.flags["yes"] is True

    # Boolean flags never swallow the next token
    result = parse_command("video --enable --url http://x")
    assert result.flags == {"enable": True, "url": "http://x"}


def test_flag_without_value_at_end():
    result = parse_command("add Task --project")
    assert result.flags == {"project": True}
    assert result.flag_str("project") is None


def test_command_is_lowercased_and_empty_input():
    assert parse_command("  MV abc done ").command == "mv"
    assert parse_command("").command == ""
    assert parse_command("   ").command == ""


def test_unclosed_quote_falls_back_to_split():
    result = parse_command('add "unfinished title')
    assert result.command == "add"
    assert result.args == ['"unfinished', "title"]
