"""Pure domain logic (no database or HTTP dependencies)."""
