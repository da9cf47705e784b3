"""NovaScan - cleanup, enrichment and ranking of multi-source social posts."""

__version__ = "0.1.0"
