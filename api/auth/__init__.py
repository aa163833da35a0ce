"""
Auth hook points (no enforcement yet).
"""
