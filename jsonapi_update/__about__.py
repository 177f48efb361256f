__version__ = "0.2.0"
__description__ = "jsonapi_update : JSON:API relationship replacement for SQLAlchemy nested attribute updates"
