import logging
import typing

import sqlalchemy as sa  # type: ignore
from sqlalchemy import orm  # type: ignore

from ...exceptions import InvalidDeclarationError, RecordNotFoundError
from ...interfaces import EntityStore

logger = logging.getLogger(__name__)

R = typing.TypeVar("R")


def single_primary_key(sa_mapper: orm.Mapper) -> typing.Tuple[str, sa.Column]:
    pks = sa_mapper.primary_key
    if len(pks) != 1:
        raise InvalidDeclarationError(
            f"{sa_mapper.class_.__name__} must have exactly one primary key column, got {len(pks)}"
        )
    return sa_mapper.get_property_by_column(pks[0]).key, pks[0]


def python_type_of(column: sa.Column) -> typing.Optional[typing.Type]:
    try:
        return column.type.python_type
    except NotImplementedError:
        return None


class SQLAEntityStore(EntityStore[R]):
    """
    An :py:class:`EntityStore` backed by an SQLAlchemy ORM session.

    String identities are converted to the python type of the primary key column; one that
    cannot be converted is treated as not found.  Changes are flushed, not committed: the
    transaction belongs to whoever owns the session.

    :param sqlalchemy.orm.Session session: the session to work with.
    :param type class_: the mapped class.
    :param Optional[str] type_name: the name used in error messages; defaults to the table name.
    """

    session: orm.Session
    class_: typing.Type[R]
    _type_name: str
    _pk_attr: str
    _pk_column: sa.Column

    @property
    def type_name(self) -> str:
        return self._type_name

    def _native_id(self, id: str) -> typing.Any:
        python_type = python_type_of(self._pk_column)
        if python_type is None or python_type is str:
            return id
        try:
            return python_type(id)
        except (TypeError, ValueError):
            raise RecordNotFoundError(self._type_name, id)

    def find_one(self, id: str) -> R:
        record = self.session.get(self.class_, self._native_id(id))
        if record is None:
            raise RecordNotFoundError(self._type_name, id)
        return record

    def find_all(self, **criteria: typing.Any) -> typing.Iterator[R]:
        q = sa.select(self.class_)
        if criteria:
            q = q.filter_by(**criteria)
        q = q.order_by(getattr(self.class_, self._pk_attr))
        return iter(self.session.execute(q).scalars())

    def save(self, record: R) -> R:
        self.session.add(record)
        self.session.flush()
        logger.debug("saved %s %r", self._type_name, getattr(record, self._pk_attr))
        return record

    def delete(self, id: str) -> None:
        record = self.find_one(id)
        self.session.delete(record)
        self.session.flush()
        logger.debug("deleted %s %r", self._type_name, id)

    def __init__(
        self,
        session: orm.Session,
        class_: typing.Type[R],
        type_name: typing.Optional[str] = None,
    ):
        sa_mapper = sa.inspect(class_)
        self.session = session
        self.class_ = class_
        self._pk_attr, self._pk_column = single_primary_key(sa_mapper)
        self._type_name = type_name if type_name is not None else sa_mapper.local_table.name
