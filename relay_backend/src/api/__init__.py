"""
API package for the relay: routers, settings, middleware and error payloads.

NOTE: Do NOT import routers or .main here. The db package imports api.errors and the
data router imports the db package, so eager imports would form a cycle.
"""
