"""Cloud agent bridge: Discord interactions in, cloud agent API calls out."""

__version__ = "1.0.0"
