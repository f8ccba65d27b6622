"""Tests for schemagen.type_scanner and the type indexes."""

from __future__ import annotations

import logging

import pytest

from schemagen.classpath import ClasspathResolver
from schemagen.index import ModuleIndex, RegistryIndex
from schemagen.loader import TypeLoader
from schemagen.type_scanner import TypeScanner
from tests._fixtures.package_builder import PackageBuilder


def _seed_events(builder: PackageBuilder) -> None:
    builder.write(
        {
            "shop/model/__init__.py": """
                from .events import Event
            """,
            "shop/model/events.py": """
                import abc


                class Event:
                    source: str


                class AuditedEvent(Event, abc.ABC):
                    @abc.abstractmethod
                    def audit(self) -> None:
                        ...


                class OrderPlaced(Event):
                    order_id: int


                class Unrelated:
                    name: str
            """,
            "shop/model/billing/invoices.py": """
                from shop.model.events import AuditedEvent, Event, OrderPlaced


                class InvoiceIssued(Event):
                    amount: float


                class PriorityOrderPlaced(OrderPlaced):
                    priority: int


                class ManualAdjustment(AuditedEvent):
                    def audit(self) -> None:
                        return None
            """,
            "shop/model/broken.py": """
                import shop_missing_dependency
            """,
            "shop/other.py": """
                from shop.model.events import Event


                class OutsideNamespace(Event):
                    pass
            """,
        }
    )


def _loader(builder: PackageBuilder) -> TypeLoader:
    return TypeLoader(ClasspathResolver().resolve([builder.path()]))


def test_scan_discovers_transitive_concrete_subtypes_in_order(
    package_builder: PackageBuilder,
) -> None:
    _seed_events(package_builder)
    loader = _loader(package_builder)

    with loader.activate():
        base = loader.resolve("shop.model.events.Event")
        scanner = TypeScanner(ModuleIndex(loader))
        discovered = scanner.scan(["shop.model"], base)

    assert [item.fqn for item in discovered] == [
        "shop.model.billing.invoices.InvoiceIssued",
        "shop.model.billing.invoices.ManualAdjustment",
        "shop.model.billing.invoices.PriorityOrderPlaced",
        "shop.model.events.OrderPlaced",
    ]
    assert all(item.base is base for item in discovered)
    assert all(item.handle is loader.resolve(item.fqn) for item in discovered)


def test_scan_optionally_includes_base_and_abstract_types(
    package_builder: PackageBuilder,
) -> None:
    _seed_events(package_builder)
    loader = _loader(package_builder)

    with loader.activate():
        base = loader.resolve("shop.model.events.Event")
        scanner = TypeScanner(ModuleIndex(loader), include_base=True, include_abstract=True)
        fqns = [item.fqn for item in scanner.scan(["shop.model"], base)]

    assert "shop.model.events.Event" in fqns
    assert "shop.model.events.AuditedEvent" in fqns
    assert "shop.other.OutsideNamespace" not in fqns


def test_scan_with_empty_namespaces_returns_nothing(package_builder: PackageBuilder) -> None:
    _seed_events(package_builder)
    loader = _loader(package_builder)

    with loader.activate():
        base = loader.resolve("shop.model.events.Event")
        assert TypeScanner(ModuleIndex(loader)).scan([], base) == []


def test_scan_skips_unimportable_modules_with_warning(
    package_builder: PackageBuilder, caplog: pytest.LogCaptureFixture
) -> None:
    _seed_events(package_builder)
    loader = _loader(package_builder)
    caplog.set_level(logging.WARNING, logger="schemagen")

    with loader.activate():
        base = loader.resolve("shop.model.events.Event")
        discovered = TypeScanner(ModuleIndex(loader)).scan(["shop.model", "shop.absent"], base)

    assert len(discovered) == 4
    messages = [record.getMessage() for record in caplog.records]
    assert any("Skipping module shop.model.broken" in message for message in messages)
    assert any("Skipping namespace shop.absent" in message for message in messages)


def test_scan_deduplicates_overlapping_namespaces(package_builder: PackageBuilder) -> None:
    _seed_events(package_builder)
    loader = _loader(package_builder)

    with loader.activate():
        base = loader.resolve("shop.model.events.Event")
        discovered = TypeScanner(ModuleIndex(loader)).scan(
            ["shop.model", "shop.model.billing"], base
        )

    assert len(discovered) == 4


def test_scan_discovers_subtypes_nested_in_classes(package_builder: PackageBuilder) -> None:
    package_builder.write(
        {
            "ledger/events.py": """
                class Event:
                    pass


                class Account:
                    class Opened(Event):
                        owner: str

                    class Audit:
                        class Closed(Event):
                            reason: str

                    Alias = Event
            """,
        }
    )
    loader = _loader(package_builder)

    with loader.activate():
        base = loader.resolve("ledger.events.Event")
        discovered = TypeScanner(ModuleIndex(loader)).scan(["ledger"], base)

    assert [item.fqn for item in discovered] == [
        "ledger.events.Account.Audit.Closed",
        "ledger.events.Account.Opened",
    ]
    assert discovered[1].handle is loader.resolve("ledger.events.Account.Opened")


def test_registry_index_enumerates_registered_names(
    package_builder: PackageBuilder, caplog: pytest.LogCaptureFixture
) -> None:
    _seed_events(package_builder)
    loader = _loader(package_builder)
    caplog.set_level(logging.WARNING, logger="schemagen")
    index = RegistryIndex(
        loader,
        [
            "shop.model.events.OrderPlaced",
            "shop.model.events.Unrelated",
            "shop.model.events.Vanished",
            "shop.other.OutsideNamespace",
        ],
    )

    with loader.activate():
        base = loader.resolve("shop.model.events.Event")
        discovered = TypeScanner(index).scan(["shop.model"], base)

    assert [item.fqn for item in discovered] == ["shop.model.events.OrderPlaced"]
    assert any("shop.model.events.Vanished" in record.getMessage() for record in caplog.records)
