"""
Source package for relay_backend.

Holds the relay service (api/, db/) and the browser-session client (webclient/).
"""
