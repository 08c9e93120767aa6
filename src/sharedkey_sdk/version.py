"""Version information for the SharedKey Python SDK"""

__version__ = "0.1.0"
