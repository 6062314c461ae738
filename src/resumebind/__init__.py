"""resumebind - placeholder binding engine for resume templates."""

__version__ = "0.1.0"
