"""Transport-agnostic operations: authorization, validation and relationship upkeep."""
