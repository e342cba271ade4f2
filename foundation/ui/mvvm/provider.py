from typing import Dict, Type, TypeVar
from loguru import logger

from .viewmodel import BaseViewModel

T = TypeVar('T', bound=BaseViewModel)


class ViewModelProvider:
    """
    Factory for creating and caching ViewModel instances.
    Constructor dependencies are resolved through the ServiceLocator.
    """
    def __init__(self, locator):
        self.locator = locator
        self._cache: Dict[type, BaseViewModel] = {}

    def get(self, vm_cls: Type[T]) -> T:
        """Get the cached ViewModel or build it with injected dependencies."""
        if vm_cls not in self._cache:
            self._cache[vm_cls] = self.locator.resolve(vm_cls)
            logger.debug(f"Created ViewModel: {vm_cls.__name__}")
        return self._cache[vm_cls]

    def release(self, vm_cls: type) -> None:
        """Dispose and forget a cached ViewModel."""
        vm = self._cache.pop(vm_cls, None)
        if vm is not None:
            vm.dispose()

    def clear(self) -> None:
        for vm_cls in list(self._cache):
            self.release(vm_cls)
