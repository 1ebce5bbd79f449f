"""keysync - reconcile a directory of public-key files with a user directory."""

__version__ = "0.1.0"
