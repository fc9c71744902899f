"""
HTTP binding: one router per resource
"""
