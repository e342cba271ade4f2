"""
MVVM Package - WPF-Style change notification for PySide6.

Provides:
- BindableProperty: Descriptor for auto-signaling properties.
- BindableBase: QObject with a generic propertyChanged signal.
- BaseViewModel: Messenger-aware ViewModel with UI-thread marshaling.
- ViewModelProvider: Resolves ViewModels through the ServiceLocator.
"""
from foundation.ui.mvvm.bindable import BindableProperty, BindableBase
from foundation.ui.mvvm.viewmodel import BaseViewModel
from foundation.ui.mvvm.provider import ViewModelProvider

__all__ = [
    "BaseViewModel",
    "BindableBase",
    "BindableProperty",
    "ViewModelProvider",
]
