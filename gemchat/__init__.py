"""GEMCHAT — interactive terminal chat for Google Gemini."""

__version__ = "1.2.0"
