"""
Addon API services

- addon_service: resolves addons and schedules missing builds
"""
