"""
Services package for the task schedule bridge.
"""
