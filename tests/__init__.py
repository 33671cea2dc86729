"""
Test suite for the block translation API.
"""
