"""Recommendation engine for SimRec.

This module contains the immutable rating store, the user-user similarity
ranking, and the weighted aggregation that turns similar users into scored
item recommendations.
"""
