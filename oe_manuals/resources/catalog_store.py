"""
OE Manuals: manual record storage
"""

import os
from typing import List as TList, Optional, Set

from sqlalchemy import Column, Integer, String, UnicodeText, UniqueConstraint
from sqlalchemy.exc import IntegrityError
from flask_sqlalchemy import SQLAlchemy
from alembic import config as alembic_config, context as alembic_context
from alembic.script import ScriptDirectory
from alembic.runtime.environment import EnvironmentContext

from ..database import db
from ..models import Manual
from ..errors.manual import DuplicateManualOrderError, UnknownManualError


__all__ = ['CatalogStore', 'DbManual']


class DbManual(db.Model):
    __tablename__ = 'manuals'
    __table_args__ = (
        UniqueConstraint('order', name='_order_uc'),
        dict(sqlite_autoincrement=True),
    )

    id = Column(Integer, primary_key=True, nullable=False)
    video_link = Column(String(4095), nullable=False)
    title = Column(String(1023), nullable=False)
    description = Column(UnicodeText, nullable=False)
    order = Column(Integer, nullable=False)
    thumbnail = Column(String(255), nullable=True)


class CatalogStore(object):
    """
    Persistent manual records with a database-enforced unique display order

    All operations must be called within the Flask app context; each of them
    commits its own transaction or rolls it back and re-raises on error.
    """
    def __init__(self, database: SQLAlchemy = db):
        """
        :param database: Flask-SQLAlchemy instance bound to the app
        """
        self.db = database

    def open(self) -> None:
        """
        Create/upgrade manual tables via Alembic
        """
        cfg = alembic_config.Config()
        cfg.set_main_option(
            'script_location', os.path.abspath(os.path.join(__file__, '..', '..', 'db_migration', 'manuals'))
        )
        script = ScriptDirectory.from_config(cfg)
        with EnvironmentContext(
                cfg, script, fn=lambda rev, _: script._upgrade_revs('head', rev), as_sql=False,
                starting_rev=None, destination_rev='head', tag=None), self.db.engine.connect() as connection:
            alembic_context.configure(connection=connection, version_table='alembic_version_manuals')

            with alembic_context.begin_transaction():
                alembic_context.run_migrations()

    def close(self) -> None:
        """
        Release the current session and all pooled connections
        """
        self.db.session.remove()
        self.db.engine.dispose()

    def insert(self, manual: Manual) -> Manual:
        """
        Add a new manual record

        :param manual: manual object; its ID, if any, is ignored

        :return: new manual object with ID assigned
        """
        try:
            if DbManual.query.filter_by(order=manual.order).count():
                raise DuplicateManualOrderError(order=manual.order)

            kw = manual.to_dict()
            kw.pop('id', None)

            db_manual = DbManual(**kw)
            self.db.session.add(db_manual)
            self.db.session.flush()
            manual = Manual(db_manual, _set_defaults=True)
            self.db.session.commit()
        except IntegrityError:
            # Concurrent writer took the same order after the check above
            self.db.session.rollback()
            raise DuplicateManualOrderError(order=manual.order)
        except Exception:
            self.db.session.rollback()
            raise

        return manual

    def find_by_order(self, order: int) -> Optional[Manual]:
        """
        Return manual with the given display order

        :param order: display order

        :return: manual object or None if no manual has this order
        """
        try:
            db_manual = DbManual.query.filter_by(order=order).one_or_none()
            return Manual(db_manual, _set_defaults=True) if db_manual is not None else None
        except Exception:
            self.db.session.rollback()
            raise

    def find_by_id(self, manual_id: int) -> Optional[Manual]:
        """
        Return manual with the given ID

        :param manual_id: manual ID

        :return: manual object or None if no manual has this ID
        """
        try:
            db_manual = self.db.session.get(DbManual, manual_id)
            return Manual(db_manual, _set_defaults=True) if db_manual is not None else None
        except Exception:
            self.db.session.rollback()
            raise

    def update(self, manual_id: int, patch: Manual) -> Manual:
        """
        Update an existing manual record

        :param manual_id: manual ID to update
        :param patch: manual object containing the fields to change; fields
            not set in `patch` are left intact

        :return: updated manual object
        """
        try:
            db_manual = self.db.session.get(DbManual, manual_id)
            if db_manual is None:
                raise UnknownManualError(id=manual_id)

            for key, val in patch.to_dict().items():
                if key == 'id':
                    # Don't allow changing manual ID
                    continue
                if key == 'order' and val != db_manual.order and \
                        DbManual.query.filter(DbManual.order == val, DbManual.id != manual_id).count():
                    raise DuplicateManualOrderError(order=val)
                setattr(db_manual, key, val)

            self.db.session.flush()
            manual = Manual(db_manual, _set_defaults=True)
            self.db.session.commit()
        except IntegrityError:
            self.db.session.rollback()
            raise DuplicateManualOrderError(order=getattr(patch, 'order', None))
        except Exception:
            self.db.session.rollback()
            raise

        return manual

    def delete(self, manual_id: int) -> Optional[Manual]:
        """
        Remove manual record

        :param manual_id: manual ID to delete

        :return: removed manual object or None if there was no such manual
        """
        try:
            db_manual = self.db.session.get(DbManual, manual_id)
            if db_manual is None:
                return None
            manual = Manual(db_manual, _set_defaults=True)
            self.db.session.delete(db_manual)
            self.db.session.commit()
        except Exception:
            self.db.session.rollback()
            raise

        return manual

    def list_all(self) -> TList[Manual]:
        """
        Return all manuals in the order they were created

        :return: list of manual objects
        """
        try:
            return [Manual(db_manual, _set_defaults=True)
                    for db_manual in DbManual.query.order_by(DbManual.id)]
        except Exception:
            self.db.session.rollback()
            raise

    def thumbnails(self) -> Set[str]:
        """
        Return references of all thumbnails held by manuals

        :return: set of asset references
        """
        try:
            return {ref for ref, in self.db.session.query(DbManual.thumbnail).filter(
                DbManual.thumbnail.isnot(None))}
        except Exception:
            self.db.session.rollback()
            raise
