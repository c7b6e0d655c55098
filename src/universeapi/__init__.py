"""UniverseAPI - HTTP client for Minecraft server status APIs"""

__version__ = "1.0.0"
