"""Empty state placeholders for the table view.

The controller never computes degenerate layouts for an empty table; it
reports ``columns_empty`` / ``rows_empty`` / ``loading`` and the view shows one
of the templates registered here instead of header or body content.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional

from PyQt6.QtWidgets import QLabel, QVBoxLayout, QWidget

from pintable.config import settings
from pintable.models import TableProjection

__all__ = [
    "EmptyStateTemplate",
    "EmptyStateRegistry",
    "empty_state_registry",
    "template_key_for",
    "EmptyStateWidget",
]


@dataclass(frozen=True)
class EmptyStateTemplate:
    key: str
    title: str
    description: str = ""


class EmptyStateRegistry:
    def __init__(self):
        self._templates: Dict[str, EmptyStateTemplate] = {}
        self.register(EmptyStateTemplate("no_columns", settings.EMPTY_TEXT, "No columns defined."))
        self.register(EmptyStateTemplate("no_rows", settings.EMPTY_TEXT))
        self.register(EmptyStateTemplate("loading", "Loading...", "Data is being loaded."))

    def register(self, template: EmptyStateTemplate) -> None:
        self._templates[template.key] = template

    def get(self, key: str) -> Optional[EmptyStateTemplate]:
        return self._templates.get(key)


empty_state_registry = EmptyStateRegistry()


def template_key_for(projection: TableProjection) -> Optional[str]:
    """Placeholder to show for ``projection``, or ``None`` when it has content."""
    if projection.loading:
        return "loading"
    if projection.columns_empty:
        return "no_columns"
    if projection.rows_empty:
        return "no_rows"
    return None


class EmptyStateWidget(QWidget):
    def __init__(self, template_key: str = "no_rows", parent: Optional[QWidget] = None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 8, 0, 8)
        self.title_label = QLabel()
        self.title_label.setObjectName("emptyStateTitle")
        layout.addWidget(self.title_label)
        self.desc_label = QLabel()
        self.desc_label.setObjectName("emptyStateDesc")
        self.desc_label.setWordWrap(True)
        layout.addWidget(self.desc_label)
        layout.addStretch(1)
        self._template_key = ""
        self.set_template(template_key)

    def template_key(self) -> str:
        return self._template_key

    def set_template(self, key: str) -> None:
        tpl = empty_state_registry.get(key)
        if tpl is None:
            return
        self._template_key = key
        self.title_label.setText(tpl.title)
        self.desc_label.setText(tpl.description)
        self.desc_label.setVisible(bool(tpl.description))
