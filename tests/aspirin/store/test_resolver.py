# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for store resolution and fallback."""

import logging
import threading

import pytest

from aspirin.errors import BackendResolutionError
from aspirin.store import (
    DEFAULT_MAIL_STORE,
    MAIL,
    QUEUE,
    MailStore,
    SimpleMailStore,
    SimpleQueueStore,
    StoreFactoryRegistry,
    class_identifier,
)
from aspirin.store.resolver import _import_factory


class CountingMailStore(SimpleMailStore):
    """Mail store that counts constructions and init calls."""

    created = 0

    def __init__(self):
        super().__init__()
        type(self).created += 1
        self.initialized = False

    def init(self):
        self.initialized = True


class NotAStore:
    """Has the right methods but does not implement MailStore."""

    def get(self, mail_id):
        return None


class ExplodingMailStore(SimpleMailStore):
    def __init__(self):
        raise RuntimeError("disk full")


class FailingInitMailStore(SimpleMailStore):
    def init(self):
        raise OSError("cannot open")


class TestFactoryRegistry:
    """Tests for StoreFactoryRegistry."""

    def test_baseline_is_registered(self):
        factories = StoreFactoryRegistry()
        assert DEFAULT_MAIL_STORE in factories.registered(MAIL)
        assert factories.lookup(MAIL, DEFAULT_MAIL_STORE) is SimpleMailStore

    def test_default_identifier(self):
        assert DEFAULT_MAIL_STORE == "aspirin.store.mail.simple.SimpleMailStore"

    def test_registered_factory_wins(self, factories):
        factories.register(MAIL, "custom", CountingMailStore)
        assert factories.lookup(MAIL, "custom") is CountingMailStore

    def test_unregister(self, factories):
        factories.register(MAIL, "custom", CountingMailStore)
        factories.unregister(MAIL, "custom")
        assert "custom" not in factories.registered(MAIL)

    def test_unknown_kind(self, factories):
        with pytest.raises(ValueError, match="spool"):
            factories.register("spool", "x", CountingMailStore)

    def test_import_dotted_path(self):
        assert _import_factory(MAIL, "aspirin.store.mail.SimpleMailStore") is SimpleMailStore

    def test_import_colon_path(self):
        assert _import_factory(QUEUE, "aspirin.store.queue:SimpleQueueStore") is SimpleQueueStore

    def test_import_missing_module(self):
        with pytest.raises(BackendResolutionError) as exc_info:
            _import_factory(MAIL, "no.such.module.Store")
        assert exc_info.value.kind == MAIL
        assert exc_info.value.identifier == "no.such.module.Store"

    def test_import_relative_path(self):
        with pytest.raises(BackendResolutionError) as exc_info:
            _import_factory(MAIL, ".relative.Store")
        assert isinstance(exc_info.value.__cause__, TypeError)

    def test_import_module_failing_at_import_time(self, tmp_path, monkeypatch):
        (tmp_path / "aspirin_failing_store.py").write_text("raise RuntimeError('boom at import')\n")
        monkeypatch.syspath_prepend(str(tmp_path))

        with pytest.raises(BackendResolutionError) as exc_info:
            _import_factory(MAIL, "aspirin_failing_store.Store")

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert "boom at import" in exc_info.value.reason


class TestStoreResolver:
    """Tests for lazy resolution through the configuration."""

    def test_default_store_is_cached(self, configuration):
        first = configuration.get_mail_store()
        second = configuration.get_mail_store()
        assert isinstance(first, SimpleMailStore)
        assert first is second
        assert configuration.stores.last_error(MAIL) is None

    def test_default_queue_store(self, configuration):
        store = configuration.get_queue_store()
        assert isinstance(store, SimpleQueueStore)
        assert configuration.get_queue_store() is store

    def test_registered_identifier(self, configuration, factories):
        factories.register(MAIL, "counting", CountingMailStore)
        configuration.set_mail_store_class_name("counting")

        store = configuration.get_mail_store()

        assert isinstance(store, CountingMailStore)
        assert store.initialized is True

    def test_dotted_path_identifier(self, configuration):
        configuration.set_mail_store_class_name(class_identifier(CountingMailStore))
        assert isinstance(configuration.get_mail_store(), CountingMailStore)

    def test_missing_type_falls_back(self, configuration, caplog):
        configuration.set_mail_store_class_name("com.example.MissingStore")

        with caplog.at_level(logging.ERROR, logger="Aspirin"):
            store = configuration.get_mail_store()

        assert isinstance(store, SimpleMailStore)
        assert configuration.get_mail_store() is store
        error = configuration.stores.last_error(MAIL)
        assert isinstance(error, BackendResolutionError)
        assert error.identifier == "com.example.MissingStore"
        assert "com.example.MissingStore" in caplog.text

    def test_relative_identifier_falls_back(self, configuration):
        configuration.set_mail_store_class_name(".relative.Store")

        store = configuration.get_mail_store()

        assert type(store) is SimpleMailStore
        assert configuration.stores.last_error(MAIL).identifier == ".relative.Store"

    @pytest.mark.parametrize("source", [
        "raise RuntimeError('boom at import')\n",
        "def broken(:\n",
    ])
    def test_module_failing_at_import_falls_back(self, configuration, tmp_path, monkeypatch, source):
        (tmp_path / "aspirin_broken_store.py").write_text(source)
        monkeypatch.syspath_prepend(str(tmp_path))
        configuration.set_queue_store_class_name("aspirin_broken_store.BrokenQueueStore")

        store = configuration.get_queue_store()

        assert type(store) is SimpleQueueStore
        assert isinstance(configuration.stores.last_error(QUEUE), BackendResolutionError)

    def test_wrong_capability_falls_back(self, configuration):
        configuration.set_mail_store_class_name(class_identifier(NotAStore))
        store = configuration.get_mail_store()
        assert type(store) is SimpleMailStore
        assert "does not implement MailStore" in configuration.stores.last_error(MAIL).reason

    def test_construction_error_falls_back(self, configuration):
        configuration.set_mail_store_class_name(class_identifier(ExplodingMailStore))
        assert type(configuration.get_mail_store()) is SimpleMailStore
        assert "disk full" in configuration.stores.last_error(MAIL).reason

    def test_init_error_falls_back(self, configuration):
        configuration.set_mail_store_class_name(class_identifier(FailingInitMailStore))
        assert type(configuration.get_mail_store()) is SimpleMailStore

    def test_empty_identifier_uses_default(self, configuration):
        configuration.set_mail_store_class_name(None)
        assert type(configuration.get_mail_store()) is SimpleMailStore
        assert configuration.stores.last_error(MAIL) is None

    def test_successful_resolution_clears_error(self, configuration):
        configuration.set_mail_store_class_name("missing.Store")
        configuration.get_mail_store()
        configuration.set_mail_store_class_name(DEFAULT_MAIL_STORE)
        configuration.get_mail_store()
        assert configuration.stores.last_error(MAIL) is None

    def test_queue_store_fallback(self, configuration):
        configuration.set_queue_store_class_name(class_identifier(SimpleMailStore))
        assert type(configuration.get_queue_store()) is SimpleQueueStore
        assert configuration.stores.last_error(QUEUE) is not None

    def test_injection_bypasses_resolution(self, configuration):
        configuration.set_mail_store_class_name("missing.Store")
        injected = CountingMailStore()

        configuration.set_mail_store(injected)

        assert configuration.get_mail_store() is injected
        assert configuration.stores.last_error(MAIL) is None

    def test_injecting_none_clears_cache(self, configuration):
        configuration.get_mail_store()
        configuration.set_mail_store(None)
        assert configuration.stores.is_cached(MAIL) is False

    def test_concurrent_first_access_builds_once(self, configuration, factories):
        CountingMailStore.created = 0
        factories.register(MAIL, "counting", CountingMailStore)
        configuration.set_mail_store_class_name("counting")
        barrier = threading.Barrier(10)
        results = []

        def worker():
            barrier.wait()
            results.append(configuration.get_mail_store())

        threads = [threading.Thread(target=worker) for _ in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert CountingMailStore.created == 1
        assert all(result is results[0] for result in results)
        assert isinstance(results[0], MailStore)
