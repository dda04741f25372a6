"""Resolver package for the GraphQL schema.

Mutation and query fields import these functions lazily so resolver modules
can depend on the database layer without slowing schema construction.
"""
