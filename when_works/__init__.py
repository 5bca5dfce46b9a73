"""when-works web backend."""

import os

__version__ = "0.1.0"

# Injected by the build (Docker build arg / CI env); "unknown" for local checkouts.
__commit__ = os.environ.get("WHEN_WORKS_COMMIT", "unknown")
__commit_short__ = __commit__[:7] if __commit__ != "unknown" else __commit__

__all__ = ["__version__", "__commit__", "__commit_short__"]
