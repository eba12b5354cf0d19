"""ANSI color codes for terminal output.

All colors use the 256-color palette.

Usage:
    from scaffolder_core.logging.colors import GREEN, RED, RESET

    print(f"{GREEN}Success!{RESET}")
"""

RESET = "\033[0m"

# Status
GREEN = "\033[38;5;82m"  # Success - bright green
RED = "\033[38;5;196m"  # Failure - bright red
YELLOW = "\033[38;5;226m"  # Warnings - bright yellow
ORANGE = "\033[38;5;208m"  # Container runs - orange

# Information
LIGHT_BLUE = "\033[38;5;153m"  # Context/debug - light blue
CYAN = "\033[38;5;51m"  # Info - cyan
MAGENTA = "\033[38;5;201m"  # Action events - magenta

__all__ = [
    "RESET",
    "GREEN",
    "RED",
    "YELLOW",
    "ORANGE",
    "LIGHT_BLUE",
    "CYAN",
    "MAGENTA",
]
