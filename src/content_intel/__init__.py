"""Local content intelligence for Bengali news articles."""

__version__ = "0.1.0"
