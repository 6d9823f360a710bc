"""End-to-end integration tests for alias resolution across all layers."""

import threading
import time
from abc import ABC, abstractmethod

import pytest

from alias_ioc import Container, Instance
from alias_ioc.domain import CircularDependencyError, UnregisteredAliasError, qualified_name
from alias_ioc.infrastructure.testing import TestContainer


class Config:
    def __init__(self):
        self.app_name = "TestApp"


class Database:
    """Database connection.

    :param Config config: application settings
    """

    instances = 0

    def __init__(self, config):
        Database.instances += 1
        self.config = config


class Cache(ABC):
    @abstractmethod
    def get(self, key): ...


class MemoryCache(Cache):
    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)


class UserRepository:
    def __init__(self, db: Database, cache: Cache):
        self.db = db
        self.cache = cache


class UserService:
    def __init__(self, repo, clock):
        """Create the service.

        Args:
            repo (UserRepository): user storage.
            clock (Clock): time source.
        """
        self.repo = repo
        self.clock = clock


class Clock:
    def now(self):
        return 0


class TestEndToEndResolution:
    """Test complete resolution scenarios across all layers."""

    def test_mixed_graph(self):
        """Test a graph of shared, transient, factory and pre-built registrations."""
        clock = Clock()
        container = Container()
        container.register("config", Config, shared=True)
        container.register("db", Database, shared=True)
        container.register("cache", MemoryCache, shared=True)
        container.register("users", UserRepository)
        container.register("clock", clock)
        container.register("service", UserService)

        first = container.resolve("service")
        second = container.resolve("service")

        assert first is not second
        assert first.repo is not second.repo
        assert first.repo.db is second.repo.db
        assert first.repo.db.config is container.resolve("config")
        assert first.repo.cache is container.resolve("cache")
        assert first.clock is clock

    def test_dotted_path_registrations(self):
        """Test a graph registered entirely by class path strings."""
        container = Container()
        for cls in (Config, Database, UserRepository, UserService, Clock):
            container.register(qualified_name(cls), shared=cls is Config)
        # class paths are only matched by name, so the Cache implementation is registered as a class
        container.register("cache", MemoryCache)

        service = container.resolve(qualified_name(UserService))

        assert isinstance(service.repo.db.config, Config)
        assert service.repo.db.config is container.resolve(qualified_name(Config))
        assert isinstance(service.repo.cache, MemoryCache)
        assert isinstance(service.clock, Clock)

    def test_autowired_graph(self):
        """Test that autowiring fills in unregistered concrete classes."""
        container = Container(autowire=True)
        container.register("cache", MemoryCache, shared=True)
        container.register("service", UserService)

        service = container.resolve("service")

        assert isinstance(service.repo.db.config, Config)
        assert service.repo.cache is container.resolve("cache")
        assert container.aliases() == ["cache", "service"]

    def test_missing_leaf_dependency(self):
        """Test that a missing leaf fails the whole resolution."""
        container = Container()
        container.register("db", Database)

        with pytest.raises(UnregisteredAliasError) as exc_info:
            container.resolve("db")

        assert exc_info.value.alias == qualified_name(Config)

    def test_factory_wiring(self):
        """Test factories that resolve other aliases themselves."""
        container = Container()
        container.register("config", Config, shared=True)
        container.register("db", lambda: Database(container.resolve("config")))

        assert container.resolve("db").config is container.resolve("config")
        assert container.resolve("db") is not container.resolve("db")

    def test_reregistration_switches_implementation(self):
        """Test that re-registering a shared alias takes effect immediately."""
        container = Container()
        container.register("cache", MemoryCache, shared=True)
        old = container.resolve("cache")

        replacement = MemoryCache()
        container.register("cache", replacement)

        assert container.resolve("cache") is replacement
        assert container.resolve("cache") is not old

    def test_value_registrations(self):
        """Test registering plain configuration values."""
        container = Container({"app.name": Instance(value="TestApp"), "app.debug": True})

        assert container["app.name"] == "TestApp"
        assert container["app.debug"] is True


class TestCycles:
    """Test cycle detection through the public API."""

    def test_factory_cycle(self):
        """Test cycles closed by factories resolving each other."""
        container = Container()
        container.register("a", lambda: container.resolve("b"))
        container.register("b", lambda: container.resolve("a"))

        with pytest.raises(CircularDependencyError) as exc_info:
            container.resolve("a")

        assert exc_info.value.dependency_chain == ["a", "b", "a"]


class TestThreadSafety:
    """Test concurrent resolution."""

    def test_shared_alias_built_once_across_threads(self):
        """Test that concurrent first resolutions share one instance."""
        built = []

        class SlowService:
            def __init__(self):
                time.sleep(0.01)
                built.append(self)

        container = Container()
        container.register("slow", SlowService, shared=True)
        results = []

        def worker():
            results.append(container.resolve("slow"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(built) == 1
        assert all(result is built[0] for result in results)
        assert len(results) == 8


class TestWithTestContainer:
    """Test swapping registrations in tests."""

    def test_mocked_leaf_in_real_graph(self):
        """Test that a mock replaces one node of a real graph."""
        container = Container()
        container.register("config", Config, shared=True)
        container.register("db", Database)
        fake_config = Config()
        fake_config.app_name = "Fake"

        with TestContainer(container) as test_container:
            test_container.mock("config", fake_config)
            assert test_container.resolve("db").config is fake_config

        assert container.resolve("db").config.app_name == "TestApp"
