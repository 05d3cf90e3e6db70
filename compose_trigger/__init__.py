"""HTTP webhook that pulls and restarts docker-compose projects."""

__version__ = "1.0.0"
