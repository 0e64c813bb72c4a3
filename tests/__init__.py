"""
Test suite for curve algebra

Contains:
- tests/unit/          : Unit tests for individual modules
"""
