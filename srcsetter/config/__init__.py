"""Configuration package.

Module split:
    - `settings`: environment-driven engine and URL settings.
    - `store`: configuration store adapters supplying the size table.
    - `sizes`: size table parsing and symbolic size resolution.
"""
