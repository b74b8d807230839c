# policy_engine/utils/__init__.py
"""Utility functions and decorators"""
