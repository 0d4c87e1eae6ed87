"""Core modules for Taskboard."""
