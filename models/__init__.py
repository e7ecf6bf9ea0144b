"""
Persistence layer: SQLAlchemy models and the shared DBStorage instance.
The engine is created lazily by storage.reload(), called from create_app().
"""
from models.db_storage import DBStorage

storage = DBStorage()
