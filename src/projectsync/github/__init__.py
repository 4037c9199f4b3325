"""GitHub GraphQL transport, queries, pagination and response decoding."""

from projectsync.github.pagination import paginate
from projectsync.github.transport import GitHubGraphQLClient, GraphQLExecutor, format_graphql_errors

__all__ = ["GitHubGraphQLClient", "GraphQLExecutor", "format_graphql_errors", "paginate"]
