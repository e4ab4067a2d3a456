"""leakview: leak trace rows, connectors and styled row text."""
from __future__ import annotations

__version__ = "0.1.0"
