"""Find the next Zoom meeting on a Google Calendar and launch it."""

__version__ = "0.3.0"
