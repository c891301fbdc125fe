"""Package version.

Copyright (c) 2025 Frodo. All rights reserved.
"""

__version__ = "2.0.0"
