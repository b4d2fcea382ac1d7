"""Sales data file organizer for OneDrive via Microsoft Graph."""

__version__ = "0.1.0"
