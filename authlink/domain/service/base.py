"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold the authentication logic that sits between the
    HTTP interface and the identity provider adapter.
    """

    pass
