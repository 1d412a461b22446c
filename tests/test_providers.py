import pytest

from tessera.container import ServiceContainer
from tessera.providers import ServiceProvider
from tessera.tags import ServiceTagRegistry


class Mailer:
    def __init__(self, host):
        self.host = host


class MailProvider(ServiceProvider):
    provides = ("mailer", "mail.host")

    def __init__(self):
        self.booted_with = None

    def register(self, container):
        self.bind(container, "mail.host", "smtp.example.com")
        self.factory(container, "mailer", lambda: Mailer(container.get("mail.host")))

    def boot(self, container):
        self.booted_with = container.get("mailer")


@pytest.fixture
def container():
    return ServiceContainer()


def test_provider_registers_and_boots(container):
    provider = MailProvider()

    container.register(provider)

    assert provider.booted_with.host == "smtp.example.com"
    assert container.get("mailer").host == "smtp.example.com"
    assert provider.provides == ("mailer", "mail.host")
    assert not provider.deferred


def test_singleton_helper_binds_one_instance(container):
    class CacheProvider(ServiceProvider):
        def register(self, container):
            self.singleton(container, "cache", {})

    container.register(CacheProvider())

    assert container.get("cache") is container.get("cache")


def test_providers_do_not_share_a_mutable_provides_default():
    class FirstProvider(ServiceProvider):
        def register(self, container):
            pass

    class SecondProvider(ServiceProvider):
        def register(self, container):
            pass

    assert FirstProvider.provides == ()
    assert isinstance(SecondProvider().provides, tuple)
    with pytest.raises(AttributeError):
        FirstProvider.provides.append("cache")


def test_services_can_be_found_by_tag(container):
    tags = ServiceTagRegistry()
    container.instance("smtp", "smtp-transport")
    container.instance("sms", "sms-transport")
    tags.tag_service("smtp", ["transport", "email"])
    tags.add_tag("sms", "transport")
    tags.add_tag("push", "transport")

    assert tags.tags_for("smtp") == ["transport", "email"]
    assert tags.tags_for("unknown") == []
    assert tags.services_tagged("transport") == ["smtp", "sms", "push"]
    assert tags.tagged(container, "transport") == {
        "smtp": "smtp-transport",
        "sms": "sms-transport",
    }
