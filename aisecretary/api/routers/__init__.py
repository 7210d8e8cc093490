from . import health, intake_router, ticket_router

__all__ = ["health", "intake_router", "ticket_router"]
