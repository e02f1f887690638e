"""Application layer – the event-sourcing runtime."""
