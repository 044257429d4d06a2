"""MarketHub notification service package.

Ensures the local ``markethub`` package takes precedence over similarly named
distributions that might be installed in the environment.
"""
