"""Task manager: task records with filtering, sorting and paging."""

__version__ = "0.1.0"
