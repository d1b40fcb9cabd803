"""Tests for the directive registry and query-string front end."""

import pytest

from cinedex.exceptions import DirectiveError, SubSearchError
from cinedex.search import (
    DIRECTIVES,
    EntityKind,
    RangeFilter,
    Searcher,
    SortKey,
    SubSearchRole,
    describe_directives,
    get_directive,
    query,
)


class TestRegistry:
    """Test directive lookup and listing."""

    def test_synonyms_resolve_to_same_directive(self):
        pairs = [
            ("years", "year"),
            ("billed", "billing"),
            ("seasons", "s"),
            ("seasons", "season"),
            ("episodes", "e"),
            ("id", "atom"),
            ("show", "tv"),
            ("rank", "rating"),
        ]
        for name, synonym in pairs:
            assert get_directive(name) is get_directive(synonym)

    def test_unknown_name(self):
        assert get_directive("bogus") is None

    def test_keys_are_unique(self):
        keys = [key for directive in DIRECTIVES for key in directive.keys]
        assert len(keys) == len(set(keys))

    def test_describe_directives_sorted_by_name(self):
        rows = describe_directives()
        names = [row[0] for row in rows]
        assert names == sorted(names)
        assert len(rows) == len(DIRECTIVES)
        sort_row = next(row for row in rows if row[0] == "sort")
        assert sort_row[2] is True
        assert "rank" in sort_row[3]


class TestApplyDirectives:
    """Test how directives change a search."""

    def test_round_trip_with_fluent_calls(self, plain_store):
        """A directive query and the equivalent fluent chain agree."""
        from_query = query(
            plain_store, "{years:1999-2003}{votes:500-}{limit:10}{sort:rank desc}"
        )
        fluent = (
            Searcher(plain_store)
            .years(1999, 2003)
            .votes(500, -1)
            .limit(10)
            .sort("rank", "desc")
        )
        assert from_query.state == fluent.state

    def test_round_trip_with_flags_and_text(self, store):
        from_query = query(
            store, "{movie} {episode} {notv} {novideo} {nocase} the matrix {debug}"
        )
        fluent = (
            Searcher(store)
            .entity(EntityKind.MOVIE)
            .entity(EntityKind.EPISODE)
            .no_tv_movies()
            .no_video_movies()
            .no_case()
            .text("the")
            .text("matrix")
            .debug()
        )
        assert from_query.state == fluent.state

    def test_ranges(self, plain_store):
        state = query(
            plain_store,
            "{rank:70-} {billed:1-5} {s:2} {e:-10} {year:1999}",
        ).state
        assert state.ranks == RangeFilter(70, None)
        assert state.billing == RangeFilter(1, 5)
        assert state.seasons == RangeFilter(2, 2)
        assert state.episodes == RangeFilter(None, 10)
        assert state.years == RangeFilter(1999, 1999)

    def test_atom_and_similar(self, plain_store):
        state = query(plain_store, "{atom:42} {similar:0.6}").state
        assert state.atom == 42
        assert state.similar_threshold == 0.6

    def test_sort_appends(self, plain_store):
        state = query(plain_store, "{sort:rank} {sort:episode asc} {sort:votes}").state
        assert state.sort_keys == [
            SortKey("rank", "desc"),
            SortKey("episode_num", "asc"),
            SortKey("votes", "desc"),
        ]

    def test_limit_disabled(self, plain_store):
        assert query(plain_store, "{limit:-1}").state.limit == -1

    def test_unmatched_tokens_are_text(self, plain_store):
        state = query(plain_store, "the {matrix").state
        assert state.terms == ["the", "{matrix"]

    def test_show_installs_tvshow_subsearch(self, plain_store):
        searcher = query(plain_store, "{show:the simpsons} {seasons:1}")
        sub = searcher.subsearches[SubSearchRole.TVSHOW].searcher
        assert sub.state.terms == ["the", "simpsons"]
        assert sub.state.entities == [EntityKind.TVSHOW]
        assert sub.state.label == "TV show"

    def test_cast_subsearch_restricted_to_actors(self, plain_store):
        searcher = query(plain_store, "{cast:keanu reeves}")
        sub = searcher.subsearches[SubSearchRole.CAST].searcher
        assert sub.state.entities == [EntityKind.ACTOR]
        assert sub.state.label == "actor"

    def test_credits_subsearch_unrestricted(self, plain_store):
        searcher = query(plain_store, "{credits:the matrix}")
        sub = searcher.subsearches[SubSearchRole.CREDITS].searcher
        assert sub.state.entities == []
        assert sub.state.label == "credits"

    def test_repeated_role_replaces_subsearch(self, plain_store):
        searcher = query(plain_store, "{show:futurama} {show:the simpsons}")
        sub = searcher.subsearches[SubSearchRole.TVSHOW].searcher
        assert sub.state.terms == ["the", "simpsons"]


class TestDirectiveErrors:
    """Test parse-time directive errors."""

    @pytest.mark.parametrize(
        ("text", "message"),
        [
            ("{bogus}", "Unrecognized search directive: bogus"),
            ("{limit}", "requires an argument"),
            ("{notv:yes}", "does not take an argument"),
            ("{limit:ten}", "Invalid integer 'ten' for limit"),
            ("{limit:-2}", "Invalid limit"),
            ("{id:abc}", "Invalid integer 'abc' for atom id"),
            ("{years:nineties}", "Could not parse"),
            ("{similar:high}", "Invalid float"),
            ("{similar:1.5}", "out of range"),
            ("{sort:popularity}", "Cannot sort by"),
            ("{sort:rank sideways}", "Invalid sort order"),
            ("{sort:rank desc twice}", "Invalid sort format"),
        ],
    )
    def test_rejected(self, plain_store, text, message):
        with pytest.raises(DirectiveError, match=message):
            query(plain_store, text)

    def test_empty_subsearch(self, plain_store):
        with pytest.raises(DirectiveError, match="requires an argument"):
            query(plain_store, "{show:}")

    def test_nested_error_carries_role(self, plain_store):
        with pytest.raises(SubSearchError) as exc_info:
            query(plain_store, "{show:{bogus} simpsons}")
        assert exc_info.value.role == "show"
        assert "Unrecognized search directive" in exc_info.value.message

    def test_fluent_sort_validates(self, plain_store):
        with pytest.raises(DirectiveError):
            Searcher(plain_store).sort("popularity")
