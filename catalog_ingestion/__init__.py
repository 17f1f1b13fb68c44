"""GitHub organization catalog ingestion.

Reads repositories, users and teams of GitHub organizations through the
GraphQL API with cursor pagination, links the team hierarchy, merges team
membership into users and emits catalog entities and repository locations.
"""
