"""
Infrastructure Module

Store backends (memory, Redis) and metrics.
"""
