"""FastAPI application module for SimRec.

This module contains the FastAPI application, route handlers, and API
endpoints for the recommendation service.
"""
