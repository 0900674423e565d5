"""Application services consumed by user interfaces."""

from .compile_service import CompileDocumentService, CompileRequest, default_output_path

__all__ = ["CompileDocumentService", "CompileRequest", "default_output_path"]
