"""Food Service Establishment compliance assessment."""

__version__ = "0.1.0"
