"""Collaborators injected into the chart: tooltips, sorting and value formatting."""

import html
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from .render_surface import Node


class Tooltipped(Protocol):
    """Something that can show and hide a tooltip for a hovered bar."""

    def show_tooltip(self, content: str, datum: Dict[str, Any], node: Node) -> Any:
        ...

    def hide_tooltip(self) -> Any:
        ...


class Sortable(Protocol):
    """Something that puts a dataset into display order."""

    def sort(self, data: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        ...


class FloatingTooltip:
    """Keeps the content and visibility of a single floating tooltip."""

    def __init__(self) -> None:
        self.content: str = ''
        self.visible: bool = False
        self.datum: Optional[Dict[str, Any]] = None

    def show_tooltip(self, content: str, datum: Dict[str, Any], node: Node) -> str:
        self.content = content
        self.datum = datum
        self.visible = True
        return content

    def hide_tooltip(self) -> None:
        self.visible = False
        self.datum = None


class ValueSorter:
    """Sorts data by one key, value by default."""

    def __init__(self, sort_key: str = 'value', ascending: bool = True) -> None:
        self.sort_key: str = sort_key
        self.ascending: bool = ascending

    def sort(self, data: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        # sorted() is stable, so ties keep their input order
        return sorted(data, key=lambda d: d.get(self.sort_key), reverse=not self.ascending)


def make_label_formatter(format_spec: str = ',.2f') -> Callable[[float], str]:
    """Build the function that turns a value into its label text.

    Args:
        format_spec: Python format specification.

    Returns:
        Formatting function.
    """
    def format_label(value: float) -> str:
        return format(value, format_spec)

    return format_label


def tooltip_content(datum: Dict[str, Any], value_display_name: str, format_label: Callable[[float], str]) -> str:
    """HTML body of the tooltip for a hovered bar."""
    content = f'<span class="tip-label">{html.escape(datum["label"])}</span>'
    content += f'<span class="name">{html.escape(value_display_name)}: </span>'
    content += f'<span class="value">{html.escape(format_label(datum["value"]))}</span>'
    return content
