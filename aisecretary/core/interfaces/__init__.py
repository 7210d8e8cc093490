from .storage import IMessageStore, ITicketStore

__all__ = ["IMessageStore", "ITicketStore"]
