"""High-level storage controllers"""
