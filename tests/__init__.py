"""Frodo test suite.

Copyright (c) 2025 Frodo. All rights reserved.
"""
