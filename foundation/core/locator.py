"""
ServiceLocator - Explicit dependency resolution and system management.

The locator is a plain object built by the application's composition root
(see ApplicationBuilder) and handed to whoever needs it. There is no
process-wide instance.

Usage:
    locator = ServiceLocator(ConfigManager("config.json"))
    locator.register_system(Messenger)
    locator.register_system(SettingsStorage, MemorySettingsStorage)
    await locator.start_all()

    vm = locator.resolve(MainViewModel)   # constructor injection
"""
import inspect
import types
import typing
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar
from loguru import logger

from .base_system import BaseSystem
from .config import ConfigManager
from .errors import ArgumentRequiredError, DependencyResolutionError

T = TypeVar('T')


class ServiceLocator:
    """
    Registry of systems plus a constructor-injection resolver.

    Args:
        config: ConfigManager shared by all systems. Defaults to an
            in-memory configuration.
    """

    def __init__(self, config: Optional[ConfigManager] = None):
        self.config = config if config is not None else ConfigManager(None)
        self._instances: Dict[type, Any] = {}
        self._factories: Dict[type, Callable[['ServiceLocator'], Any]] = {}
        self._started: List[BaseSystem] = []

    # --- Registration ---

    def register_system(self, cls: Type[T], implementation: Optional[type] = None) -> T:
        """
        Construct and register a singleton.

        Args:
            cls: Key the instance is registered under
            implementation: Concrete type to build; defaults to cls

        Returns:
            The created instance
        """
        concrete = implementation or cls
        if cls in self._instances:
            logger.warning(f"{cls.__name__} already registered; replacing")
        instance = self._construct(concrete)
        self._instances[cls] = instance
        logger.debug(f"Registered system: {cls.__name__} -> {concrete.__name__}")
        return instance

    def register_instance(self, cls: Type[T], instance: T) -> T:
        """Register an already constructed object under cls."""
        self._instances[cls] = instance
        logger.debug(f"Registered instance: {cls.__name__}")
        return instance

    def register_factory(self, cls: Type[T], factory: Callable[['ServiceLocator'], T]) -> None:
        """Register a factory called on every resolve(cls)."""
        self._factories[cls] = factory
        logger.debug(f"Registered factory: {cls.__name__}")

    def is_registered(self, cls: type) -> bool:
        return cls in self._instances or cls in self._factories

    # --- Lookup ---

    def get_system(self, cls: Type[T]) -> T:
        """
        Return the registered singleton for cls.

        Raises:
            KeyError: If cls is not registered
        """
        try:
            return self._instances[cls]
        except KeyError:
            raise KeyError(f"System not registered: {cls.__name__}") from None

    def resolve(self, cls: Type[T]) -> T:
        """
        Produce an instance of cls with its declared dependencies populated.

        Registered singletons and factories win; otherwise a new instance of
        cls is constructed.

        Raises:
            ArgumentRequiredError: If a required constructor argument cannot
                be resolved
        """
        if cls in self._instances:
            return self._instances[cls]
        if cls in self._factories:
            return self._factories[cls](self)
        return self._construct(cls)

    def _construct(self, cls: type) -> Any:
        if not inspect.isclass(cls):
            raise DependencyResolutionError(f"Cannot construct non-class {cls!r}")
        if inspect.isabstract(cls):
            raise DependencyResolutionError(f"Cannot construct abstract class {cls.__name__}")

        try:
            hints = typing.get_type_hints(cls.__init__)
        except (NameError, TypeError):
            hints = {}

        kwargs = {}
        for name, param in inspect.signature(cls.__init__).parameters.items():
            if name == "self" or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            if name == "locator":
                kwargs[name] = self
                continue
            if name == "config":
                kwargs[name] = self.config
                continue

            annotation = _unwrap_optional(hints.get(name))
            if annotation is not None and self.is_registered(annotation):
                kwargs[name] = self.resolve(annotation)
            elif param.default is not param.empty:
                continue
            else:
                raise ArgumentRequiredError(name, cls)

        return cls(**kwargs)

    # --- Lifecycle ---

    def systems(self) -> List[BaseSystem]:
        """Registered BaseSystem instances in dependency order."""
        ordered: List[type] = []
        visiting: List[type] = []
        keys = [k for k, v in self._instances.items() if isinstance(v, BaseSystem)]

        def visit(key: type):
            if key in ordered:
                return
            if key in visiting:
                cycle = " -> ".join(k.__name__ for k in visiting + [key])
                raise DependencyResolutionError(f"Dependency cycle: {cycle}")
            visiting.append(key)
            for dep in getattr(self._instances[key], "depends_on", []):
                if dep not in self._instances:
                    raise DependencyResolutionError(
                        f"{key.__name__} depends on unregistered {dep.__name__}"
                    )
                visit(dep)
            visiting.pop()
            ordered.append(key)

        for key in keys:
            visit(key)
        return [self._instances[k] for k in ordered if isinstance(self._instances[k], BaseSystem)]

    async def start_all(self) -> None:
        """Initialize all registered systems, dependencies first."""
        for system in self.systems():
            if system.is_ready:
                continue
            await system.initialize()
            self._started.append(system)
            logger.debug(f"Started {type(system).__name__}")
        logger.info(f"ServiceLocator: {len(self._started)} system(s) started")

    async def stop_all(self) -> None:
        """Shut down started systems in reverse order."""
        while self._started:
            system = self._started.pop()
            if not system.is_ready:
                continue
            try:
                await system.shutdown()
            except Exception as e:
                logger.error(f"Error stopping {type(system).__name__}: {e}")
        logger.info("ServiceLocator: all systems stopped")


def _unwrap_optional(annotation: Any) -> Any:
    """Optional[X] -> X; anything else unchanged."""
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation
