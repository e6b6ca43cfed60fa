"""docrag - document retrieval and template-based answer synthesis."""

__version__ = "0.1.0"
