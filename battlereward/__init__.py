"""HTTP service that settles two-player battles and keeps Elo ratings in Redis."""

__version__ = "0.1.0"