"""pasctl - PAM Interactive Shell.

An interactive command shell for administering a privileged-access-management
backend.

Features:
- Interactive, script, piped and single-command modes
- Quote-aware command parsing
- Table, JSON and YAML output for any result shape
- Persistent configuration with environment overrides
"""

__version__ = "1.0.0"
__license__ = "MIT"

from pasctl.cli import main

__all__ = ["main", "__version__"]
