"""Keep an integration branch in step with upstream pull requests."""

__version__ = "0.1.0"
