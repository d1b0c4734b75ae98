"""A small FTP server serving one directory tree to an anonymous user."""

__version__ = "0.1.0"