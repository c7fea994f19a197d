"""db/repositories package — SQL query helpers, one module per table group."""
