"""Admin API transports."""

from shopkit.clients.graphql import GraphqlClient, GraphqlRequest

__all__ = ["GraphqlClient", "GraphqlRequest"]
