"""
Custom Exception Hierarchy - Domain-specific error types

Typed exceptions for the failure modes of the dashboard API.
All custom exceptions inherit from VoteboardError for easy catching.

Taxonomy:
- not-found: primary entity absent (surfaced as 404)
- upstream failure: the store errored (surfaced as 500, detail logged)
- empty results are never exceptions; formatters handle them in-band
"""

from typing import Optional, Dict, Any


class VoteboardError(Exception):
    """Base exception for all voteboard errors

    Carries a context dict so handlers can log the failing parameters
    without parsing the message.
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.context = context or {}
        super().__init__(message)

    def __str__(self):
        base_msg = super().__str__()
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base_msg} (context: {context_str})"
        return base_msg


# ========== Database Errors ==========


class DatabaseError(VoteboardError):
    """Database operation failures

    Examples:
    - Connection failures
    - Query errors
    - Missing views or tables
    """
    pass


class DatabaseConnectionError(DatabaseError):
    """Failed to establish or maintain database connection"""
    pass


class QueryError(DatabaseError):
    """A read against the store failed

    Raised by repositories so routes never see driver exceptions.
    """

    def __init__(
        self,
        message: str,
        query_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.query_name = query_name
        self.original_error = original_error

        context = {}
        if query_name:
            context['query'] = query_name
        if original_error:
            context['original_error'] = str(original_error)

        super().__init__(message, context)


# ========== Lookup Errors ==========


class NotFoundError(VoteboardError):
    """Primary entity of a request does not exist

    Examples:
    - Candidate id not in candidates table
    """

    def __init__(self, message: str, entity: Optional[str] = None, entity_id: Optional[Any] = None):
        self.entity = entity
        self.entity_id = entity_id

        context = {}
        if entity:
            context['entity'] = entity
        if entity_id is not None:
            context['entity_id'] = str(entity_id)

        super().__init__(message, context)


# ========== Configuration Errors ==========


class ConfigurationError(VoteboardError):
    """Configuration or environment errors

    Examples:
    - Invalid port
    - Pool sizes out of order
    """

    def __init__(self, message: str, config_key: Optional[str] = None):
        self.config_key = config_key
        context = {}
        if config_key:
            context['config_key'] = config_key
        super().__init__(message, context)

