"""
Team hierarchy: forest reconstruction, placement rules and inheritance.
"""
