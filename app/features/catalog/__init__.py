"""
Resource, verb and permission catalog feature module.

Stores the protectable resources, the verbs that can be granted on them and
the permissions binding the two, and exposes them as read-only lists.
"""
