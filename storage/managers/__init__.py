"""SQLite access helpers"""
