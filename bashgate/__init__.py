"""bashgate - destructive-command safety gate for coding agents."""

__version__ = "0.3.0"
__logo__ = "🛡️"
