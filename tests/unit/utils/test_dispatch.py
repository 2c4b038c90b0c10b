from sqlapm.exceptions import DriverError, IntegrityError, SQLAPMError
from sqlapm.utils.dispatch import TypeDispatcher

# pyright: reportPrivateUsage=false


class Base:
    pass


class Child(Base):
    pass


class Unrelated:
    pass


def test_dispatcher_register_and_get_exact_match() -> None:
    dispatcher = TypeDispatcher[str]()
    dispatcher.register(Base, "base")

    assert dispatcher.get(Base()) == "base"


def test_dispatcher_mro_resolution() -> None:
    dispatcher = TypeDispatcher[str]()
    dispatcher.register(Base, "base")

    assert dispatcher.get(Child()) == "base"


def test_dispatcher_exact_priority() -> None:
    dispatcher = TypeDispatcher[str]()
    dispatcher.register(Base, "base")
    dispatcher.register(Child, "child")

    assert dispatcher.get(Base()) == "base"
    assert dispatcher.get(Child()) == "child"


def test_dispatcher_no_match() -> None:
    dispatcher = TypeDispatcher[str]()
    dispatcher.register(Base, "base")

    assert dispatcher.get(Unrelated()) is None


def test_dispatcher_caching() -> None:
    dispatcher = TypeDispatcher[str]()
    dispatcher.register(Base, "base")

    child = Child()
    assert dispatcher.get(child) == "base"
    assert dispatcher.get(child) == "base"
    assert Child in dispatcher._cache


def test_dispatcher_register_invalidates_cache() -> None:
    dispatcher = TypeDispatcher[str]()
    dispatcher.register(Base, "base")
    assert dispatcher.get(Child()) == "base"

    dispatcher.register(Child, "child")

    assert dispatcher.get(Child()) == "child"


def test_dispatcher_clear_cache() -> None:
    dispatcher = TypeDispatcher[str]()
    dispatcher.register(Base, "base")

    dispatcher.get(Child())
    assert Child in dispatcher._cache

    dispatcher.clear_cache()
    assert Child not in dispatcher._cache


def test_dispatcher_exception_classes() -> None:
    dispatcher = TypeDispatcher[type[SQLAPMError]]()
    dispatcher.register(Exception, DriverError)
    dispatcher.register(ValueError, IntegrityError)

    assert dispatcher.get(KeyError()) is DriverError
    assert dispatcher.get(UnicodeError()) is IntegrityError
