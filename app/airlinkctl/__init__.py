"""airlinkctl - Installer for the Airlink panel and daemon."""

__version__ = "0.1.0"
