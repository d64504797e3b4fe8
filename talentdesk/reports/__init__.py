"""
Recruiter performance reporting: derived metrics, funnel and exports.
"""
