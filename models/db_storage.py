from os import getenv

from dotenv import load_dotenv
from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import scoped_session, sessionmaker

from models.base_model import Base
from models.password_reset import PasswordResetToken
from models.refresh_token import RefreshToken
from models.user import User

load_dotenv()
# Map model names for easy lookup
classes = {
    "User": User,
    "RefreshToken": RefreshToken,
    "PasswordResetToken": PasswordResetToken,
}

DEFAULT_DATABASE_URL = "sqlite:///hr-management.db"


class DBStorage:
    """Engine + thread-local session registry shared by the stores and the API."""

    __engine = None
    __session = None

    def __init__(self, database_url: str | None = None, echo: bool = False):
        self.database_url = database_url or getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
        self.echo = echo

    def _create_engine(self):
        engine = create_engine(self.database_url, echo=self.echo, pool_pre_ping=True)
        if engine.url.get_backend_name() == "sqlite":
            # Enable SQLite foreign keys (needed for ON DELETE CASCADE)
            @event.listens_for(engine, "connect")
            def _set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()
        return engine

    def reload(self, database_url: str | None = None):
        """(Re)create the engine if needed, create tables and start the session registry"""
        if database_url and database_url != self.database_url:
            self.dispose()
            self.database_url = database_url
        if self.__engine is None:
            self.__engine = self._create_engine()
        Base.metadata.create_all(self.__engine)
        self.close()
        session_factory = sessionmaker(bind=self.__engine, expire_on_commit=False)
        self.__session = scoped_session(session_factory)

    def new(self, obj):
        """Add object to session"""
        self.__session.add(obj)

    def save(self):
        """Commit session"""
        try:
            self.__session.commit()
        except SQLAlchemyError:
            self.__session.rollback()
            raise

    def rollback(self):
        self.__session.rollback()

    def delete(self, obj=None):
        """Delete object if exists (hard delete)"""
        if obj:
            self.__session.delete(obj)

    def get(self, cls, id):
        """Fetch one object by class and ID"""
        if cls in classes.values():
            return self.__session.get(cls, id)
        return None

    def ping(self) -> bool:
        try:
            self.__session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            self.__session.rollback()
            return False

    def close(self):
        """Remove session (for API teardown)"""
        if self.__session is not None:
            self.__session.remove()

    def drop_all(self):
        """Drop every mapped table (test teardown)"""
        self.close()
        if self.__engine is not None:
            Base.metadata.drop_all(self.__engine)

    def dispose(self):
        self.close()
        if self.__engine is not None:
            self.__engine.dispose()
            self.__engine = None

    # expose the SQLAlchemy session for advanced querying (joins, filters, etc.)
    def get_session(self):
        return self.__session
