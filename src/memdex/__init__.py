"""memdex — indexing and relationship engine for markdown memory files."""

__version__ = "0.1.0"
