from .markdown import MarkdownExporter

__all__ = ["MarkdownExporter"]
