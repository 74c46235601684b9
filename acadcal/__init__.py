"""acadcal: academic calendar retrieval for institutional portal sessions."""

__version__ = "0.1.0"
