"""Configuración y motor SQLAlchemy compartidos por la API de logs."""
