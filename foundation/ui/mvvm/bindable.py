"""
WPF-Style Bindable Property Descriptor.

Provides automatic signal emission on property change, reducing MVVM boilerplate.

Usage:
    class MyViewModel(BindableBase):
        username = BindableProperty(default="")
        age = BindableProperty(default=0)

    # Changing the property emits propertyChanged("username", "Alice")
    vm.username = "Alice"
"""
from typing import Any, Optional, Callable, TypeVar, Generic
from PySide6.QtCore import QObject, Signal

T = TypeVar('T')


class BindableProperty(Generic[T]):
    """
    Descriptor that emits a signal when the property value changes.

    Inspired by WPF's DependencyProperty / INotifyPropertyChanged pattern.
    Writes go through the owner's set_property(), so a view-model with a
    dispatcher marshals them onto the UI thread.

    Args:
        default: Default value for the property.
        signal_name: Optional specific signal name. Defaults to "{property_name}Changed".
        coerce: Optional callable to coerce/validate the value before setting.

    Example:
        class UserViewModel(BindableBase):
            name = BindableProperty(default="")
            age = BindableProperty(default=0, coerce=lambda x: max(0, int(x)))
    """

    def __init__(
        self,
        default: T = None,
        signal_name: Optional[str] = None,
        coerce: Optional[Callable[[Any], T]] = None
    ):
        self.default = default
        self._signal_name = signal_name
        self.coerce = coerce
        self._attr_name: str = ""
        self._public_name: str = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self._public_name = name
        self._attr_name = f"_bindable_{name}"
        if not self._signal_name:
            self._signal_name = f"{name}Changed"

    @property
    def name(self) -> str:
        return self._public_name

    @property
    def signal_name(self) -> str:
        return self._signal_name

    def __get__(self, obj: Optional[QObject], objtype: type = None) -> T:
        if obj is None:
            return self  # type: ignore
        return getattr(obj, self._attr_name, self.default)

    def __set__(self, obj: QObject, value: Any) -> None:
        if self.coerce is not None:
            value = self.coerce(value)

        setter = getattr(obj, "set_property", None)
        if setter is not None:
            setter(self._public_name, value)
        else:
            self.apply(obj, value)

    def apply(self, obj: QObject, value: Any) -> bool:
        """Store value and emit notifications. Returns True if it changed."""
        old_value = getattr(obj, self._attr_name, self.default)
        if old_value == value:
            return False

        setattr(obj, self._attr_name, value)

        # Specific signal first ("nameChanged"), then the generic one
        specific_signal = getattr(obj, self._signal_name, None)
        if specific_signal is not None and callable(getattr(specific_signal, 'emit', None)):
            specific_signal.emit(value)

        generic_signal = getattr(obj, 'propertyChanged', None)
        if generic_signal is not None and callable(getattr(generic_signal, 'emit', None)):
            generic_signal.emit(self._public_name, value)
        return True


class BindableBase(QObject):
    """
    Base class for ViewModels with WPF-style property change notification.

    Provides:
    - A generic `propertyChanged` signal for any property changes.
    - Works with `BindableProperty` descriptors for automatic notification.
    """

    # Generic signal emitted for any property change: (property_name, new_value)
    propertyChanged = Signal(str, object)

    def __init__(self):
        super().__init__()

    def set_property(self, name: str, value: Any) -> bool:
        """
        Assign a property and notify if the value changed.

        Works for BindableProperty descriptors and for plain attributes
        (stored as "_name").
        """
        descriptor = getattr(type(self), name, None)
        if isinstance(descriptor, BindableProperty):
            return descriptor.apply(self, value)

        attr_name = f"_{name}"
        if hasattr(self, attr_name) and getattr(self, attr_name) == value:
            return False
        setattr(self, attr_name, value)
        self.notify_property_changed(name, value)
        return True

    def notify_property_changed(self, property_name: str, value: Any) -> None:
        """
        Manually emit a property changed notification.

        Use this for properties not using BindableProperty descriptor.
        """
        self.propertyChanged.emit(property_name, value)
