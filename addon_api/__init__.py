"""Addon API - resolves Ember addons and schedules their builds"""

__version__ = "1.0.0"
