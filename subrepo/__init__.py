"""subrepo — keep external source trees synced into a host project."""

__version__ = "0.2.0"
