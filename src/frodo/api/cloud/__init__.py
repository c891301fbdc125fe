"""Environment (cloud tenant) APIs.

Copyright (c) 2025 Frodo. All rights reserved.
"""
