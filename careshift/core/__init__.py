"""
Core infrastructure: configuration, database, auth, permissions, events
"""
