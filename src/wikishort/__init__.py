"""wikishort - shortest unambiguous wiki links for Markdown vaults."""

__version__ = "0.1.0"
