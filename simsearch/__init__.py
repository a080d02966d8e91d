"""SimSearch: in-memory embedding similarity search engine."""

__version__ = "0.1.0"
