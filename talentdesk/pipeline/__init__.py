"""
Candidate pipeline: status taxonomy and stage projection.
"""
