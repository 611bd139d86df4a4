"""SSH OGM: reachability dashboard and launcher for SSH servers."""

__version__ = "0.1.0"
