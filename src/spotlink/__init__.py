"""spotlink - aggregating Spotify client with session refresh."""

from spotlink.client import Client, create_client
from spotlink.config import Settings

__version__ = "0.1.0"

__all__ = ["Client", "Settings", "__version__", "create_client"]
