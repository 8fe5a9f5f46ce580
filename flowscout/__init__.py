"""
FlowScout - Hybrid search over a catalog of automation workflow templates.

Example:
    >>> from flowscout.domains.catalog import CorpusStore
    >>> from flowscout.domains.search import HybridSearchEngine, SearchQuery
    >>> engine = HybridSearchEngine(CorpusStore.from_documents(records))
    >>> results = await engine.search(SearchQuery(text="gmail to slack"))
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
