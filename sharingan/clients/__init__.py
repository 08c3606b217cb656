"""API clients for the Sharingan scores tool."""

from sharingan.clients.espn import ESPNClient

__all__ = ["ESPNClient"]
