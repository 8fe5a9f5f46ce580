"""
Filesystem Adapter - Corpus directory loading.
"""

from .loader import CorpusSource, load_corpus_directory

__all__ = ["CorpusSource", "load_corpus_directory"]
