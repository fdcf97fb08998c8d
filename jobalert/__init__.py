"""Scheduled job-board polling with filtered, ranked Telegram alerts."""

__version__ = "1.0.0"
