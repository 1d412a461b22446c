import pytest

from tessera.container import ServiceContainer
from tessera.errors import ServiceNotFoundError
from tessera.factories import ClosureFactory, Factory, InstanceFactory, LazyFactory


class Greeting:
    def __init__(self, name="world"):
        self.name = name


@pytest.fixture
def container():
    return ServiceContainer()


def test_registered_factory_produces_service(container):
    greeting = Greeting()
    container.add_factory("greeting", InstanceFactory(greeting))

    assert container.has("greeting")
    assert container.get("greeting") is greeting


def test_custom_factory_is_invoked(container):
    class GreetingFactory(Factory):
        def create(self, *args, **kwargs):
            return Greeting("factory")

    container.add_factory("greeting", GreetingFactory())

    assert container.get("greeting").name == "factory"


def test_has_is_false_for_unregistered_name(container):
    container.add_factory("greeting", InstanceFactory(Greeting()))

    assert not container.has("missing")
    assert "greeting" in container
    assert "missing" not in container


def test_get_unregistered_name_raises(container):
    with pytest.raises(ServiceNotFoundError, match='Service "unknown" was not found'):
        container.get("unknown")


def test_service_not_found_is_a_key_error(container):
    with pytest.raises(KeyError):
        container.get(Greeting)


def test_arguments_are_forwarded_to_factory(container):
    container.add_factory("greeting", ClosureFactory(lambda name: Greeting(name)))

    assert container.get("greeting", "Arthur").name == "Arthur"
    assert container.get("greeting", name="Martha").name == "Martha"


def test_name_keyword_reaches_the_factory_for_type_keys(container):
    container.factory(Greeting, lambda name, punctuation="": Greeting(name + punctuation))

    greeting = container.get(Greeting, name="Rose", punctuation="!")

    assert greeting.name == "Rose!"


def test_closure_factory_creates_a_new_object_each_time(container):
    container.factory("greeting", Greeting)

    assert container.get("greeting") is not container.get("greeting")


def test_adding_a_factory_again_overwrites_it(container):
    first, second = Greeting("first"), Greeting("second")
    container.instance("greeting", first)
    container.instance("greeting", second)

    assert container.get("greeting") is second
    assert container.names() == ["greeting"]


def test_factory_errors_propagate(container):
    def broken():
        raise RuntimeError("boom")

    container.factory("broken", broken)

    with pytest.raises(RuntimeError, match="boom"):
        container.get("broken")


def test_lazy_factory_invokes_callable_once(container):
    calls = []

    def make_greeting():
        calls.append(1)
        return Greeting()

    factory = LazyFactory(make_greeting)
    container.add_factory("greeting", factory)

    assert not factory.initialized
    assert calls == []

    first = container.get("greeting")
    second = container.get("greeting")

    assert first is second
    assert factory.initialized
    assert calls == [1]


def test_lazy_registration_shortcut(container):
    container.lazy("greeting", Greeting)

    assert container.get("greeting") is container.get("greeting")


def test_remove_drops_binding(container):
    container.instance("greeting", Greeting())
    container.remove("greeting")
    container.remove("never-registered")

    assert not container.has("greeting")
