"""cinedex: search a local movie, TV and actor catalogue.

The catalogue is a SQLite database of movies, TV shows, episodes and actors
keyed by atoms. Searches are built either with the fluent
:class:`~cinedex.search.Searcher` API or from query strings mixing free text
with ``{directives}``::

    from cinedex.config import CinedexSettings
    from cinedex.database import open_store
    from cinedex.search import query

    with open_store(CinedexSettings(database_path="imdb.db")) as store:
        for result in query(store, "{show:the simpsons} {seasons:1}").results():
            print(result.name, result.attrs)
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
