"""
Coordinate rows owned by places.
"""
