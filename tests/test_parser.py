"""Tests for command line tokenizing and flag extraction."""

from pasctl.shell.parser import extract_flags, join_args, split_command, tokenize


class TestTokenize:
    """Test quote-aware tokenizing."""

    def test_double_quoted_span(self):
        """Test that a double-quoted span becomes one argument."""
        assert tokenize('a "b c" d') == ["a", "b c", "d"]

    def test_single_and_double_quotes(self):
        """Test both quote characters."""
        assert tokenize("'x' \"y\"") == ["x", "y"]

    def test_empty_line(self):
        """Test that an empty or blank line gives no arguments."""
        assert tokenize("") == []
        assert tokenize("   \t ") == []

    def test_unterminated_quote(self):
        """Test that an unterminated quote runs to the end of the line."""
        assert tokenize('a "b') == ["a", "b"]
        assert tokenize("say 'hello world") == ["say", "hello world"]

    def test_other_quote_kept_inside_span(self):
        """Test that the other quote character is literal inside a span."""
        assert tokenize('say "it\'s here"') == ["say", "it's here"]
        assert tokenize("say 'a \"b\" c'") == ["say", 'a "b" c']

    def test_quote_inside_token(self):
        """Test that a quote may open in the middle of a token."""
        assert tokenize('accounts list --safe="Prod Servers" --limit=10') == [
            "accounts", "list", "--safe=Prod Servers", "--limit=10"
        ]

    def test_repeated_whitespace(self):
        """Test that runs of whitespace separate arguments once."""
        assert tokenize("a  \t b\n") == ["a", "b"]

    def test_empty_quotes_dropped(self):
        """Test that an empty quoted token is not emitted."""
        assert tokenize('""') == []
        assert tokenize("a '' b") == ["a", "b"]


class TestExtractFlags:
    """Test separating flags from positional arguments."""

    def test_flags_and_positionals(self):
        """Test a mixed argument list."""
        flags, positional = extract_flags(["--a=1", "-b", "x", "--c=", "y"])
        assert flags == {"a": "1", "b": "true", "c": ""}
        assert positional == ["x", "y"]

    def test_short_and_long_flags(self):
        """Test single- and double-dash flags."""
        assert extract_flags(["--x=1", "-y", "pos"]) == ({"x": "1", "y": "true"}, ["pos"])

    def test_last_occurrence_wins(self):
        """Test that a repeated key keeps the last value."""
        flags, positional = extract_flags(["--limit=5", "--limit=10"])
        assert flags == {"limit": "10"}
        assert positional == []

    def test_value_keeps_later_equals(self):
        """Test that only the first '=' separates key and value."""
        flags, _ = extract_flags(["--filter=safeName=Prod"])
        assert flags == {"filter": "safeName=Prod"}

    def test_lone_dash_is_positional(self):
        """Test that a single dash is a positional argument."""
        flags, positional = extract_flags(["-"])
        assert flags == {}
        assert positional == ["-"]

    def test_empty(self):
        """Test an empty argument list."""
        assert extract_flags([]) == ({}, [])


class TestJoinArgs:
    """Test joining arguments back into a line."""

    def test_plain_arguments(self):
        """Test that plain arguments are joined with spaces."""
        assert join_args(["accounts", "list"]) == "accounts list"

    def test_quotes_arguments_with_spaces(self):
        """Test that arguments with spaces are quoted and re-tokenize."""
        line = join_args(["connect", "Prod Servers"])
        assert line == 'connect "Prod Servers"'
        assert tokenize(line) == ["connect", "Prod Servers"]


class TestSplitCommand:
    """Test splitting a line into command and subcommand."""

    def test_full_line(self):
        """Test a command with subcommand and options."""
        assert split_command("accounts list --safe=x") == ("accounts", "list", ["--safe=x"])

    def test_command_only(self):
        """Test a command without subcommand."""
        assert split_command("status") == ("status", "", [])

    def test_empty_line(self):
        """Test an empty line."""
        assert split_command("  ") == ("", "", [])
