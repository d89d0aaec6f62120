"""Truncates label text in place until it fits a pixel-width budget."""

import math
from typing import Any, Callable, Iterable

from .render_surface import Node

ELLIPSIS: str = '...'


class LabelTrimmer:
    """Trims rendered labels to the width returned by `get_label_size`.

    A label that does not fit is cut to the number of characters its mean
    character width suggests, followed by an ellipsis, and then shortened one
    character at a time until the re-measured text fits. The bare ellipsis is
    the floor.
    """

    def __init__(
        self,
        get_label_size: Callable[[Any, Node], float],
        get_label_text: Callable[[Any], str],
        reserved_char_length: int = 0
    ) -> None:
        """Initialize the trimmer.

        Args:
            get_label_size: Returns the width budget for a datum and its node.
            get_label_text: Returns the full label text for a datum.
            reserved_char_length: Characters to hold back from the estimate.
        """
        self.get_label_size = get_label_size
        self.get_label_text = get_label_text
        self.reserved_char_length: int = reserved_char_length

    def trim(self, nodes: Iterable[Node], measure: Callable[[Node], float]) -> None:
        """Set and trim the text of every node.

        Args:
            nodes: Text nodes bound to their datum.
            measure: Returns the rendered width of a placed text node.
        """
        for node in nodes:
            self.trim_node(node, measure)

    def trim_node(self, node: Node, measure: Callable[[Node], float]) -> str:
        """Set and trim the text of a single node.

        Returns:
            The text left on the node.
        """
        text = self.get_label_text(node.datum)
        node.text(text)
        label_size = self.get_label_size(node.datum, node)

        text_length = measure(node)
        if text_length <= label_size or not text:
            return text

        char_width = text_length / len(text)
        num_chars = int(math.floor(label_size / char_width)) - len(ELLIPSIS) - self.reserved_char_length
        num_chars = max(0, min(num_chars, len(text) - 1))
        node.text(text[:num_chars] + ELLIPSIS)

        while num_chars > 0 and measure(node) > label_size:
            num_chars -= 1
            node.text(text[:num_chars] + ELLIPSIS)
        return node.text_content
