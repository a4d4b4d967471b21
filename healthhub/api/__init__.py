"""
HTTP API Package

FastAPI routers over the HealthAPI facade.
"""
