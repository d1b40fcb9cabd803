"""Tests for query tokenization."""

import pytest

from cinedex.search.tokenizer import directive_parts, query_tokens


class TestQueryTokens:
    """Test splitting queries into tokens."""

    def test_directive_kept_whole(self):
        """Whitespace inside braces does not split the directive."""
        assert query_tokens("a {x y z} b") == ["a", "{x y z}", "b"]

    def test_adjacent_directives(self):
        """Directives written back to back become separate tokens."""
        assert query_tokens("{years:1999-2003}{votes:500-}{limit:10}") == [
            "{years:1999-2003}",
            "{votes:500-}",
            "{limit:10}",
        ]

    def test_unterminated_directive_flushed(self):
        """An unclosed brace still yields the buffered text."""
        assert query_tokens("simpsons {show:the simp") == [
            "simpsons",
            "{show:the simp",
        ]

    def test_nested_braces(self):
        """Nested directives stay inside their parent token."""
        assert query_tokens("{show:{tvshow} simpsons} {seasons:1}") == [
            "{show:{tvshow} simpsons}",
            "{seasons:1}",
        ]

    @pytest.mark.parametrize("separator", [" ", "\t", "\r", "\n", "  \n\t "])
    def test_whitespace_separators(self, separator):
        """Every whitespace character separates tokens outside braces."""
        assert query_tokens(f"the{separator}matrix") == ["the", "matrix"]

    def test_whitespace_preserved_inside_braces(self):
        assert query_tokens("{show:the\tsimpsons}") == ["{show:the\tsimpsons}"]

    def test_empty_and_blank_queries(self):
        assert query_tokens("") == []
        assert query_tokens("   \n ") == []

    def test_stray_closing_brace_is_text(self):
        """A closing brace with nothing open is an ordinary character."""
        assert query_tokens("a} b") == ["a}", "b"]

    def test_text_glued_to_directive(self):
        """Text directly before a brace belongs to the same token."""
        assert query_tokens("a{x}") == ["a{x}"]

    def test_restartable(self):
        """Tokenizing is a pure function of the input."""
        query = "{show:the simpsons} {votes:500-} homer"
        assert query_tokens(query) == query_tokens(query)


class TestDirectiveParts:
    """Test splitting directive tokens into name and value."""

    def test_name_only(self):
        assert directive_parts("{notv}") == ("notv", "")

    def test_name_and_value(self):
        assert directive_parts("{years:1990-1999}") == ("years", "1990-1999")

    def test_split_on_first_colon(self):
        assert directive_parts("{show:star trek: voyager}") == (
            "show",
            "star trek: voyager",
        )

    def test_trims_whitespace(self):
        assert directive_parts("{ sort : rank desc }") == ("sort", "rank desc")

    @pytest.mark.parametrize(
        "token", ["matrix", "{}", "{x", "x}", "{:value}", "{ }", "a{x}"]
    )
    def test_free_text(self, token):
        """Tokens that are not well-formed directives are free text."""
        assert directive_parts(token) is None
