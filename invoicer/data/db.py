from __future__ import annotations

from pathlib import Path
from typing import Dict, Generator, Union
from contextlib import contextmanager

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session, create_engine


_ENGINES: Dict[str, Engine] = {}


def get_engine(db_path: Union[str, Path], echo: bool = False) -> Engine:
	"""Return a cached SQLAlchemy engine for the SQLite file at db_path."""
	key = str(Path(db_path).resolve())
	engine = _ENGINES.get(key)
	if engine is None:
		# Use posix path for SQLAlchemy URL compatibility on Windows
		url = f"sqlite:///{Path(key).as_posix()}"
		engine = create_engine(url, echo=echo, connect_args={"check_same_thread": False})
		_ENGINES[key] = engine
	return engine


def create_db_and_tables(db_path: Union[str, Path], echo: bool = False) -> Engine:
	"""Create the SQLite database file and all SQLModel tables."""
	# Ensure models are imported so metadata has all tables
	import invoicer.data.models  # noqa: F401

	Path(db_path).parent.mkdir(parents=True, exist_ok=True)
	engine = get_engine(db_path, echo=echo)
	SQLModel.metadata.create_all(engine)
	return engine


def dispose_engine(db_path: Union[str, Path]) -> None:
	"""Close pooled connections for db_path and forget the cached engine."""
	engine = _ENGINES.pop(str(Path(db_path).resolve()), None)
	if engine is not None:
		engine.dispose()


def get_session(db_path: Union[str, Path], echo: bool = False) -> Session:
	"""Create a new SQLModel Session bound to the engine for db_path.

	expire_on_commit=False so returned instances keep attribute values after commit
	(avoids refresh on closed sessions when callers use detached instances).
	"""
	return Session(get_engine(db_path, echo=echo), expire_on_commit=False)


@contextmanager
def session_scope(db_path: Union[str, Path], echo: bool = False) -> Generator[Session, None, None]:
	"""Context manager-style generator for sessions.

	Usage:
		with session_scope(path) as s:
			... use s ...
	"""
	session = get_session(db_path, echo=echo)
	try:
		yield session
		session.commit()
	except Exception:
		session.rollback()
		raise
	finally:
		session.close()
