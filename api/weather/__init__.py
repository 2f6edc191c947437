"""
Passthrough proxy for a third-party current-weather API.
"""
