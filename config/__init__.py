"""
Configuration Package

Tunable values live in config/settings.py.
"""
