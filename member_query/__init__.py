"""member-query: dynamic member search over a Member/Team database."""

__version__ = "0.1.0"
