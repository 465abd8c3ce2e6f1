"""VirtuoHub Flet client: shell, feature controllers and auth modal."""
