"""DOI Finder: resolve free-text bibliographic citations to DOIs."""

__version__ = "0.1.0"
