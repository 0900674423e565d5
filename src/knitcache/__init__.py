"""knitcache: compile literate documents with fingerprint-keyed snippet caching."""

__version__ = "0.1.0"
