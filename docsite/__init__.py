"""Content catalog and resource resolution for versioned documentation sites."""

__version__ = "0.1.0"
