"""
Unit tests for DependencyContainer.
"""

import pytest

from watermark_backend.application.dependency_container import (
    DependencyContainer,
    DependencyNotFoundError,
)


class Service:
    pass


class Other:
    pass


@pytest.fixture
def container():
    return DependencyContainer()


def test_singleton_returns_same_instance(container):
    instance = Service()
    container.register_singleton(Service, instance)

    assert container.resolve(Service) is instance
    assert container.resolve(Service) is instance


def test_override_wins_over_singleton(container):
    original, replacement = Service(), Service()
    container.register_singleton(Service, original)

    container.override(Service, replacement)

    assert container.resolve(Service) is replacement


def test_override_without_registration(container):
    replacement = Other()
    container.override(Other, replacement)

    assert container.resolve(Other) is replacement


def test_unregistered_raises(container):
    with pytest.raises(DependencyNotFoundError):
        container.resolve(Other)


def test_is_registered_and_count(container):
    container.register_singleton(Service, Service())
    container.override(Other, Other())

    assert container.is_registered(Service)
    assert container.is_registered(Other)
    assert container.registered_count() == 2


def test_override_of_registered_service_counts_once(container):
    container.register_singleton(Service, Service())
    container.override(Service, Service())

    assert container.registered_count() == 1
