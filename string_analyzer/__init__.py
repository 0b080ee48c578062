"""String Analyzer Service - analyze and store string properties."""

__version__ = "1.0.0"
