"""Paper registry kept in an external key-value store, with a signature-gated reveal."""

__version__ = "0.1.0"
