"""Storage implementations (SQLite and in-memory)"""
