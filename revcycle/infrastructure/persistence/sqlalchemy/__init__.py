"""SQLAlchemy persistence."""
