"""Tests for running searches against a catalogue."""

import logging
import sqlite3

import pytest

from cinedex.database import Store
from cinedex.search import (
    Credit,
    EntityKind,
    Searcher,
    SubSearchRole,
    UserRank,
    query,
)
from tests.catalogue_data import (
    BART_THE_GENIUS,
    CARRIE_ANNE,
    FUTURAMA,
    HOMERS_ODYSSEY,
    KEANU,
    MATRIX_REVISITED,
    MATRIX_TV,
    MOANING_LISA,
    SIMPSONS,
    SIMPSONS_MOVIE,
    SPACE_PILOT,
    THE_MATRIX,
    TREEHOUSE,
)


def _ids(results):
    return [r.id for r in results]


class TestTextMatching:
    """Test exact, pattern and fuzzy name matching."""

    def test_exact_match(self, plain_store):
        results = query(plain_store, "The Matrix").results()
        assert len(results) == 1
        matrix = results[0]
        assert matrix.entity is EntityKind.MOVIE
        assert matrix.id == THE_MATRIX
        assert matrix.name == "The Matrix"
        assert matrix.year == 1999
        assert matrix.attrs == ""
        assert matrix.similarity == -1.0
        assert matrix.rank == UserRank(votes=1500000, rank=87)
        assert matrix.credit is None

    def test_exact_match_is_case_sensitive(self, plain_store):
        assert query(plain_store, "the matrix").results() == []

    def test_nocase(self, plain_store):
        results = query(plain_store, "{nocase} the matrix").results()
        assert _ids(results) == [THE_MATRIX]

    def test_wildcards(self, plain_store):
        results = query(plain_store, "%matrix% {sort:year}").results()
        assert _ids(results) == [MATRIX_REVISITED, THE_MATRIX, MATRIX_TV]

    def test_wildcards_disable_fuzzy(self, store):
        searcher = Searcher(store).text("%Matrix%")
        assert searcher.state.fuzzy is False
        results = searcher.results()
        assert {r.id for r in results} == {THE_MATRIX, MATRIX_REVISITED, MATRIX_TV}
        assert all(not r.has_similarity for r in results)

    def test_fuzzy_ranks_by_similarity(self, store):
        results = query(store, "the matrix {movie}").results()
        assert _ids(results)[:3] == [THE_MATRIX, MATRIX_TV, MATRIX_REVISITED]
        assert results[0].similarity == pytest.approx(1.0)
        assert results[1].similarity == pytest.approx(0.75)
        similarities = [r.similarity for r in results]
        assert similarities == sorted(similarities, reverse=True)

    def test_similar_threshold(self, store):
        results = query(store, "the matrix {movie} {similar:0.9}").results()
        assert _ids(results) == [THE_MATRIX]

    def test_nothing_similar(self, store):
        assert query(store, "zzqq").results() == []


class TestFilters:
    """Test the non-text filters."""

    def test_entity_restriction(self, plain_store):
        results = query(plain_store, "{tvshow} {sort:name}").results()
        assert _ids(results) == [FUTURAMA, SIMPSONS]
        assert results[0].attrs == "1999-2013"
        assert results[1].attrs == "1989-????"

    def test_several_entities(self, plain_store):
        results = query(plain_store, "{tvshow} {actor} {limit:-1}").results()
        assert {r.entity for r in results} == {EntityKind.TVSHOW, EntityKind.ACTOR}
        assert len(results) == 5

    def test_movie_attrs(self, plain_store):
        results = query(plain_store, "{movie} {sort:atom_id}").results()
        attrs = {r.id: r.attrs for r in results}
        assert attrs[SIMPSONS_MOVIE] == ""
        assert attrs[MATRIX_REVISITED] == "(V)"
        assert attrs[MATRIX_TV] == "(TV)"

    def test_no_tv_movies(self, plain_store):
        results = query(plain_store, "{movie} {notv}").results()
        assert {r.id for r in results} == {SIMPSONS_MOVIE, THE_MATRIX, MATRIX_REVISITED}

    def test_no_video_movies(self, plain_store):
        results = query(plain_store, "{movie} {novideo}").results()
        assert {r.id for r in results} == {SIMPSONS_MOVIE, THE_MATRIX, MATRIX_TV}

    def test_years(self, plain_store):
        results = query(plain_store, "{years:1999}").results()
        assert {r.id for r in results} == {THE_MATRIX, FUTURAMA, SPACE_PILOT}

    def test_ranks_exclude_unrated(self, plain_store):
        results = query(plain_store, "{rank:85-}").results()
        assert {r.id for r in results} == {TREEHOUSE, THE_MATRIX}

    def test_atom(self, plain_store):
        results = query(plain_store, "{id:9}").results()
        assert len(results) == 1
        assert results[0].entity is EntityKind.ACTOR
        assert results[0].name == "Keanu Reeves"
        assert results[0].year == 0

    def test_seasons_leave_other_kinds_alone(self, plain_store):
        results = query(plain_store, "{movie} {seasons:1}").results()
        assert len(results) == 4

    def test_limit(self, plain_store):
        assert len(query(plain_store, "{movie} {limit:2}").results()) == 2
        assert len(query(plain_store, "{movie}", limit=1).results()) == 1


class TestSubsearches:
    """Test searches narrowed by nested searches."""

    def test_simpsons_episodes_by_rank(self, store):
        """Episodes of a fuzzily named show, filtered and sorted."""
        results = query(
            store,
            "{show:the simpsons}{votes:500-}{sort:rank desc}{sort:votes desc}{limit:10}",
        ).results()
        assert _ids(results) == [BART_THE_GENIUS, HOMERS_ODYSSEY, MOANING_LISA]
        assert all(r.entity is EntityKind.EPISODE for r in results)
        assert results[0].attrs == "(TV show: The Simpsons, #1.2)"
        assert results[0].rank == UserRank(votes=1200, rank=78)

    def test_seasons_and_episodes(self, plain_store):
        assert _ids(query(plain_store, "{show:The Simpsons} {s:2}").results()) == [
            TREEHOUSE
        ]
        results = query(plain_store, "{show:The Simpsons} {e:3}").results()
        assert {r.id for r in results} == {HOMERS_ODYSSEY, TREEHOUSE}

    def test_unmatched_subsearch_matches_nothing(self, plain_store):
        assert query(plain_store, "{show:No Such Show}").results() == []

    def test_cast(self, plain_store):
        results = query(plain_store, "{cast:Keanu Reeves} {sort:year}").results()
        assert _ids(results) == [MATRIX_REVISITED, THE_MATRIX]
        assert results[0].credit == Credit(KEANU, MATRIX_REVISITED, "Himself", 3)

    def test_cast_with_billing(self, plain_store):
        results = query(plain_store, "{cast:Keanu Reeves} {billed:1}").results()
        assert _ids(results) == [THE_MATRIX]
        assert results[0].credit == Credit(KEANU, THE_MATRIX, "Neo", 1)

    def test_credits_sorted_by_billing(self, plain_store):
        results = query(plain_store, "{credits:The Matrix} {sort:billing}").results()
        assert _ids(results) == [KEANU, CARRIE_ANNE]
        assert [r.credit.character for r in results] == ["Neo", "Trinity"]

    def test_cast_and_credits_together(self, plain_store):
        results = query(
            plain_store, "{cast:Keanu Reeves} {credits:The Matrix}"
        ).results()
        assert results == []

    def test_voice_credit_attrs(self, plain_store):
        results = query(plain_store, "{cast:Dan Castellaneta} {episode}").results()
        assert _ids(results) == [BART_THE_GENIUS]
        assert results[0].credit.attrs == "(voice)"

    def test_show_role_overrides_nested_kinds(self, plain_store):
        searcher = query(plain_store, "{show:{movie} The Matrix}")
        child = searcher.subsearches[SubSearchRole.TVSHOW].searcher
        assert child.state.entities == [EntityKind.TVSHOW]
        assert child.results() == []
        assert searcher.results() == []

        futurama = query(plain_store, "{show:{movie} Futurama}").results()
        assert _ids(futurama) == [SPACE_PILOT]

    def test_cast_role_overrides_fluent_kinds(self, plain_store):
        child = Searcher(plain_store).entity(EntityKind.MOVIE).text("Keanu Reeves")
        searcher = Searcher(plain_store).cast(child)
        assert child.state.entities == [EntityKind.ACTOR]
        assert {r.id for r in searcher.results()} == {THE_MATRIX, MATRIX_REVISITED}


class TestExecution:
    """Test running, rerunning and debugging searches."""

    def test_results_are_repeatable(self, store):
        searcher = query(store, "{show:the simpsons} {sort:rank}")
        assert searcher.results() == searcher.results()

    def test_debug_writes_sql_to_stderr(self, plain_store, capsys):
        query(plain_store, "{debug} {movie}").results()
        captured = capsys.readouterr()
        assert "SELECT" in captured.err
        assert "SELECT" not in captured.out

    def test_sql_not_logged_without_debug(self, plain_store, caplog):
        caplog.set_level(logging.DEBUG)
        query(plain_store, "{movie} The Matrix").results()
        compiled = [
            r for r in caplog.records if r.getMessage() == "Compiled search query"
        ]
        assert compiled
        assert not any(hasattr(r, "sql") for r in compiled)
        assert "SELECT" not in caplog.text

    def test_store_errors_propagate(self):
        conn = sqlite3.connect(":memory:")
        try:
            with pytest.raises(sqlite3.OperationalError):
                Searcher(Store(conn)).results()
        finally:
            conn.close()

    def test_pick_uses_search_label(self, plain_store):
        seen = []

        def chooser(results, what):
            seen.append(what)
            return results[-1]

        searcher = query(plain_store, "{tvshow} {sort:name}").chooser(chooser)
        chosen = searcher.pick(searcher.results())
        assert chosen.id == SIMPSONS
        assert seen == ["entity"]
