from .person import PersonService, PersonStorage

__all__ = ["PersonService", "PersonStorage"]
