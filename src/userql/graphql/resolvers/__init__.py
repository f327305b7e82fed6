"""Resolver package for GraphQL schema.

Resolvers take their dependencies from the request's LookupContext.
"""
