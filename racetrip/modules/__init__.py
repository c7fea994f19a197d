"""modules package — planning, narrative, catalog, validation and observability."""
