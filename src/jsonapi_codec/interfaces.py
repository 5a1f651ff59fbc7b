"""
This module contains the interface definitions that need to be implemented by the
storage backend the documents are read from and written to.

"""
import abc
import typing

R = typing.TypeVar("R")


class EntityStore(typing.Generic[R], metaclass=abc.ABCMeta):
    """
    An :py:class:`EntityStore` looks up, persists and removes the records of a single
    resource type.  Identities are handed over in their string form.
    """

    @property
    @abc.abstractmethod
    def type_name(self) -> str:
        """
        Returns a name describing the kind of records the store manages.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def find_one(self, id: str) -> R:
        """
        Fetches the record with the given identity.

        :param str id: the identity of the record.
        :return: the record.
        :raises RecordNotFoundError: if no such record exists.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def find_all(self, **criteria: typing.Any) -> typing.Iterable[R]:
        """
        Returns an iterable over the records, optionally narrowed down by
        field-value pairs given as keyword arguments.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def save(self, record: R) -> R:
        """
        Persists the record, assigning its identity if it has none yet.

        :param Any record: the record to persist.
        :return: the persisted record.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def delete(self, id: str) -> None:
        """
        Removes the record with the given identity.

        :param str id: the identity of the record.
        :raises RecordNotFoundError: if no such record exists.
        """
        ...  # pragma: nocover
