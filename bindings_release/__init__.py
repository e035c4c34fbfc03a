"""Build, verify and publish the iOS binding package."""

__version__ = "0.1.0"
