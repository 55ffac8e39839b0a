"""Product Finder: retrieval-augmented product search and recommendations."""

__version__ = "0.1.0"
