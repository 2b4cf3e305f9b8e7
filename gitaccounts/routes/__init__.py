"""
Route definitions, one subpackage per provider and one module per resource family.
"""

from gitaccounts.routes.base import PaginatedRoute, Route

__all__ = ["PaginatedRoute", "Route"]
