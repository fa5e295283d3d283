from PySide6.QtCore import QObject
from PySide6.QtWidgets import QWidget


class BaseModule(QObject):
    """A page hosted by the main window's navigation list."""

    title = ""

    def get_widget(self) -> QWidget:
        raise NotImplementedError

    def refresh(self):
        """Reload the page's data. Called once when the window is first shown."""

    def on_close(self):
        """Called when the hosting window closes; drop per-session state here."""
