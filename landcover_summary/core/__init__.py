"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named constants and enums
- exceptions: Custom exception hierarchy
"""
