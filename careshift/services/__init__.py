"""
Business services: shift lifecycle, statistics, locations, users
"""
