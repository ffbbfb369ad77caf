"""
Shared console instances for secproto.

Provides global Rich consoles that can be used across the application.
"""

from rich.console import Console

# Global console instances - import these directly
console = Console()
err_console = Console(stderr=True)
