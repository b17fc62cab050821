"""
Core configuration and logging for the task schedule bridge.
"""
