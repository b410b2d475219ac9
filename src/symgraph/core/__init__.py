"""
Core Package.

Contains the symbolic graph itself:
- Nodes and Data References
- Deterministic Traversal
- The Symbol handle and its Composition Engine
- Gradient graph re-attachment
"""
