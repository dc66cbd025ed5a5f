"""SimRec: neighborhood-based collaborative filtering recommender.

This package provides an in-memory user-user collaborative filtering engine
over a sparse rating matrix, and a small REST service that serves similar
users and item recommendations from it.

Modules:
    api: FastAPI application and REST API endpoints
    recommender: Rating store, similarity ranking and item aggregation
"""

__version__ = "0.1.0"
