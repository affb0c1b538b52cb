"""Pull request policy predicates and reviewer selection."""

__version__ = "0.1.0"

__all__ = [
    "author",
    "branch",
    "files",
    "label",
    "model",
    "predicates",
    "reviewer",
    "signature",
    "status",
    "title",
]