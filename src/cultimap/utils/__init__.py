"""
CultiMap - Utilities Package

Logging, translation, configuration persistence and exception helpers.
"""
