"""Utility helpers for the Frodo library.

Copyright (c) 2025 Frodo. All rights reserved.
"""
