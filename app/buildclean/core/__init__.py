"""Core modules for buildclean.

Configuration loading, target planning, clean orchestration, paths,
logging setup, and theming.
"""
