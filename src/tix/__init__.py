"""tix: issue-driven git workflow automation."""

__version__ = "0.4.0"
__author__ = "tix contributors"
