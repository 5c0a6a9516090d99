"""Infrastructure layer: database wiring and SQLModel repositories."""
