"""Infrastructure - persistencia de logs."""
