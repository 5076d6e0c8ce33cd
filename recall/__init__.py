"""
Idea review core: per-concept scheduling and daily review-queue selection.
"""
