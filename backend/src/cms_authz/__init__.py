"""Role and policy authorization core for a content management system."""

__version__ = "0.1.0"
