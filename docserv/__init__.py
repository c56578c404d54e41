"""docserv: redirects from manpage references to rendered manpages."""

__version__ = "0.4.0"
