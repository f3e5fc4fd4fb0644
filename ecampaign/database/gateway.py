# ecampaign/database/gateway.py
"""Row-level access to the relational store.

QueryGateway is the only object the workflows use to read or write rows. It
wraps a SQLAlchemy session and exposes a deliberately small surface:
equality filters, ordering, counts, insert, update, keyed upsert, and a
transaction context. Any SQLAlchemyError is rolled back and re-raised as
DownstreamError carrying the driver's message.

Usage:
    gateway = QueryGateway(db.session)
    with gateway.transaction():
        user = gateway.find_one(User, email='a@x.com')
        gateway.update(User, {'email_verified': True}, id=user.id)
"""

import logging
from contextlib import contextmanager
from functools import wraps

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ecampaign.errors import DownstreamError

logger = logging.getLogger(__name__)


def _downstream(func):
    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except SQLAlchemyError as e:
            self.session.rollback()
            message = str(getattr(e, 'orig', None) or e)
            logger.error("Query %s failed: %s", func.__name__, message)
            raise DownstreamError(message)
    return wrapper


class QueryGateway:
    def __init__(self, session):
        self.session = session

    @_downstream
    def find_one(self, model, **filters):
        return self.session.query(model).filter_by(**filters).first()

    @_downstream
    def find_all(self, model, order_by=None, descending=False, limit=None, **filters):
        query = self.session.query(model).filter_by(**filters)
        if order_by is not None:
            column = getattr(model, order_by)
            query = query.order_by(column.desc() if descending else column.asc(), model.id)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    @_downstream
    def count(self, model, **filters):
        return self.session.query(model).filter_by(**filters).count()

    @_downstream
    def insert(self, model, **values):
        row = model(**values)
        self.session.add(row)
        self.session.flush()
        return row

    @_downstream
    def update(self, model, values, **filters):
        """Apply `values` to every row matching `filters`; returns the number of rows touched."""
        if not filters:
            raise ValueError("update() refuses to run without a filter")
        rows = self.session.query(model).filter_by(**filters).all()
        for row in rows:
            for key, value in values.items():
                setattr(row, key, value)
        self.session.flush()
        return len(rows)

    @_downstream
    def upsert(self, model, keys, values):
        """Insert or update the single row identified by the uniqueness key `keys`."""
        row = self.session.query(model).filter_by(**keys).first()
        if row is None:
            row = model(**keys, **values)
            self.session.add(row)
        else:
            for key, value in values.items():
                setattr(row, key, value)
        self.session.flush()
        return row

    @contextmanager
    def transaction(self):
        """Commit everything issued inside the block, or roll all of it back."""
        try:
            yield self
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            message = str(getattr(e, 'orig', None) or e)
            logger.error("Transaction rolled back: %s", message)
            raise DownstreamError(message)
        except Exception:
            self.session.rollback()
            raise

    @_downstream
    def ping(self):
        self.session.execute(text('SELECT 1'))
        return True
