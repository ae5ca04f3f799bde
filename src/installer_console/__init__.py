"""Web console pages for the OSGi installer: resource state report and configuration printer."""

__version__ = "0.1.0"
