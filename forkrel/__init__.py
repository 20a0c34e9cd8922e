"""fork-release: release orchestration for forks that track an upstream."""

__version__ = "0.1.0"
