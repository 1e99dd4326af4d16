def load_models() -> None:
    """Import every ORM module so their tables are registered on BaseModel.metadata."""
    import src.auth.repository.orm_models  # noqa: F401
    import src.events.repository.orm_models  # noqa: F401
    import src.guests.repository.orm_models  # noqa: F401
