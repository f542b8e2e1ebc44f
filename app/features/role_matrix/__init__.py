"""
Role permission matrix feature module.

Reconciles the flat permission catalog with the hierarchical resource tree
and computes checkbox states and next selections for the role editor.
"""
