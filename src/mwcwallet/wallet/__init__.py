"""
Transaction construction and signing.
"""
