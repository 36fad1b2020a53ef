"""StarPulse: global fame index lookup for public figures."""

__version__ = "0.1.0"
