"""truckflow: weighbridge and loading-dock session tracking."""

__version__ = "0.1.0"
