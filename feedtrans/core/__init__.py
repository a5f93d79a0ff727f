"""Core models, events, errors and the request pipeline."""
