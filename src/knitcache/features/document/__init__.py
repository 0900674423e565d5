# Where: knitcache.features.document.__init__
# What: Expose the document model and parser.
# Why: Provide a cohesive import surface for the build and UI layers.

from .domain.document import Block, Document, ProseBlock, SnippetBlock
from .domain.options import build_options, parse_chunk_header
from .usecases.parser import parse_document, read_document

__all__ = [
    "Block",
    "Document",
    "ProseBlock",
    "SnippetBlock",
    "build_options",
    "parse_chunk_header",
    "parse_document",
    "read_document",
]
