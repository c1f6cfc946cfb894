"""
Tests for the texture optimiser.
"""
