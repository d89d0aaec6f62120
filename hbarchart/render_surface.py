"""SVG-like render surface for the horizontal bar chart.

The surface is a small retained node tree: nodes can be created, removed,
selected by class, given attributes and text, and their text can be measured
synchronously once placed. Text is measured with OpenCV's Hershey font so the
measured extents match the raster preview drawn by ``rasterize``.
"""

import html
import logging
import math
import re
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

import cv2
import numpy as np

logger = logging.getLogger(__name__)

# --- Drawing Constants ---
FONT: int = cv2.FONT_HERSHEY_SIMPLEX
FONT_COLOR: Tuple[int, int, int] = (0, 0, 0)
LINE_COLOR: Tuple[int, int, int] = (0, 0, 0)
BG_COLOR: Tuple[int, int, int] = (255, 255, 255)

SVG_NS: str = 'http://www.w3.org/2000/svg'

NAMED_COLORS: Dict[str, Tuple[int, int, int]] = {
    'black': (0, 0, 0),
    'white': (255, 255, 255),
    'gray': (128, 128, 128),
    'grey': (128, 128, 128),
    'red': (255, 0, 0),
    'green': (0, 128, 0),
    'blue': (0, 0, 255),
    'orange': (255, 165, 0),
    'steelblue': (70, 130, 180),
}

_RGB_PATTERN = re.compile(r'rgb\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)')
_TRANSLATE_PATTERN = re.compile(r'translate\(\s*(-?[\d.e+-]+)\s*[, ]\s*(-?[\d.e+-]+)\s*\)')


def fmt_num(value: float) -> str:
    """Format a number in its shortest stable form for SVG output."""
    if isinstance(value, int):
        return str(value)
    if not math.isfinite(value):
        return str(value)
    if value == int(value):
        return str(int(value))
    text = f"{value:.6f}".rstrip('0').rstrip('.')
    return '0' if text == '-0' else text


def start_canvas(width: int, height: int, bg_color: Tuple[int, int, int] = BG_COLOR) -> np.ndarray:
    """Create a new canvas with specified dimensions and background color.

    Args:
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        bg_color: Background color as BGR tuple (default: white).

    Returns:
        A numpy array representing the canvas.
    """
    return np.full((max(1, height), max(1, width), 3), bg_color, dtype=np.uint8)


def get_text_dimensions(text: str, font_scale: float, thickness: int) -> Tuple[int, int]:
    """Get text width and height for given font parameters.

    Args:
        text: The text string to measure.
        font_scale: Font scale factor.
        thickness: Font thickness.

    Returns:
        Tuple of (width, height) in pixels.
    """
    if not text:
        return 0, 0
    (text_w, text_h), _ = cv2.getTextSize(text, FONT, font_scale, thickness)
    return text_w, text_h


def parse_color(color: Optional[str]) -> Optional[Tuple[int, int, int]]:
    """Parse a CSS colour into an OpenCV BGR tuple.

    Supports ``#rgb``, ``#rrggbb``, ``rgb(r, g, b)`` and a handful of names.

    Returns:
        BGR tuple, or None if the colour is not understood.
    """
    if not color:
        return None
    color = color.strip().lower()

    rgb: Optional[Tuple[int, int, int]] = None
    if color.startswith('#'):
        hex_digits = color[1:]
        if len(hex_digits) == 3:
            hex_digits = ''.join(c * 2 for c in hex_digits)
        if len(hex_digits) == 6:
            try:
                rgb = (int(hex_digits[0:2], 16), int(hex_digits[2:4], 16), int(hex_digits[4:6], 16))
            except ValueError:
                rgb = None
    else:
        match = _RGB_PATTERN.fullmatch(color)
        if match:
            rgb = tuple(min(255, int(c)) for c in match.groups())
        else:
            rgb = NAMED_COLORS.get(color)

    if rgb is None:
        return None
    r, g, b = rgb
    return (b, g, r)


def parse_translate(transform: Optional[str]) -> Tuple[float, float]:
    """Extract the offset of a ``translate(x, y)`` transform, (0, 0) otherwise."""
    if not transform:
        return 0.0, 0.0
    match = _TRANSLATE_PATTERN.search(transform)
    if not match:
        return 0.0, 0.0
    return float(match.group(1)), float(match.group(2))


def _parse_compound(compound: str) -> Tuple[Optional[str], List[str]]:
    """Split ``tag.cls1.cls2`` into its tag (or None) and class names."""
    parts = compound.split('.')
    tag = parts[0] or None
    return tag, [p for p in parts[1:] if p]


class Node:
    """A node of the render tree, with optional bound datum and event handlers."""

    def __init__(self, tag: str, class_: Optional[str] = None) -> None:
        self.tag: str = tag
        self.classes: List[str] = class_.split() if class_ else []
        self.attrs: Dict[str, Any] = {}
        self.text_content: str = ''
        self.children: List['Node'] = []
        self.parent: Optional['Node'] = None
        self.is_root: bool = False

        # Data binding
        self.datum: Any = None
        self.index: Optional[int] = None

        self.handlers: Dict[str, Callable[[Any, Optional[int], 'Node'], Any]] = {}

    # --- Tree structure ---

    def append(self, tag: str, class_: Optional[str] = None) -> 'Node':
        child = Node(tag, class_)
        child.parent = self
        self.children.append(child)
        return child

    def insert_first(self, tag: str, class_: Optional[str] = None) -> 'Node':
        child = Node(tag, class_)
        child.parent = self
        self.children.insert(0, child)
        return child

    def remove(self) -> None:
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None

    @property
    def attached(self) -> bool:
        """Whether the node is placed in a surface's tree."""
        node: Optional[Node] = self
        while node is not None:
            if node.is_root:
                return True
            node = node.parent
        return False

    def iter_descendants(self) -> Iterator['Node']:
        """Yield descendants in document order."""
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    # --- Attributes ---

    def attr(self, attrs: Dict[str, Any]) -> 'Node':
        """Set attributes; callables are invoked with the bound datum and index."""
        for name, value in attrs.items():
            if callable(value):
                value = value(self.datum, self.index)
            self.attrs[name] = value
        return self

    def get(self, name: str) -> Any:
        return self.attrs.get(name)

    def style(self, name: str, value: Any) -> 'Node':
        """Set one declaration of the inline style, keeping the others.

        Args:
            name: CSS property, e.g. 'fill'.
            value: Property value, a callable taking the bound datum and index,
                or None to remove the declaration.

        Returns:
            This node.
        """
        if callable(value):
            value = value(self.datum, self.index)
        declarations = self.styles()
        if value is None:
            declarations.pop(name, None)
        else:
            declarations[name] = str(value)

        if declarations:
            self.attrs['style'] = ';'.join(f"{k}:{v}" for k, v in declarations.items())
        else:
            self.attrs.pop('style', None)
        return self

    def styles(self) -> Dict[str, str]:
        """Inline style declarations by property name."""
        declarations: Dict[str, str] = {}
        for declaration in (self.get('style') or '').split(';'):
            name, _, value = declaration.partition(':')
            if name.strip():
                declarations[name.strip()] = value.strip()
        return declarations

    def text(self, value: Any) -> 'Node':
        if callable(value):
            value = value(self.datum)
        self.text_content = '' if value is None else str(value)
        return self

    def classed(self, name: str, on: bool) -> 'Node':
        if on and name not in self.classes:
            self.classes.append(name)
        elif not on and name in self.classes:
            self.classes.remove(name)
        return self

    def has_class(self, name: str) -> bool:
        return name in self.classes

    # --- Events ---

    def on(self, event: str, handler: Callable[[Any, Optional[int], 'Node'], Any]) -> 'Node':
        self.handlers[event] = handler
        return self

    def dispatch(self, event: str) -> Any:
        """Invoke the handler for `event` with this node's datum and index."""
        handler = self.handlers.get(event)
        if handler is None:
            return None
        return handler(self.datum, self.index, self)

    # --- Selection ---

    def _matches(self, tag: Optional[str], classes: List[str]) -> bool:
        if tag is not None and self.tag != tag:
            return False
        return all(c in self.classes for c in classes)

    def select_all(self, selector: str) -> List['Node']:
        """Descendants matching a selector of ``tag.class`` compounds.

        Compounds separated by whitespace use the descendant combinator, so
        ``.y.axis line`` matches lines inside a node classed ``y`` and ``axis``.
        """
        compounds = [_parse_compound(c) for c in selector.split()]
        if not compounds:
            return []
        *ancestors, (tag, classes) = compounds

        matches = []
        for node in self.iter_descendants():
            if not node._matches(tag, classes):
                continue
            # Walk up looking for each ancestor compound, innermost first
            pending = list(reversed(ancestors))
            current = node.parent
            while pending and current is not None and current is not self:
                if current._matches(*pending[0]):
                    pending.pop(0)
                current = current.parent
            if not pending:
                matches.append(node)
        return matches

    def select(self, selector: str) -> Optional['Node']:
        found = self.select_all(selector)
        return found[0] if found else None

    def __repr__(self) -> str:
        classes = ''.join(f".{c}" for c in self.classes)
        return f"Node({self.tag}{classes}, children={len(self.children)})"


class RenderSurface:
    """Root of a render tree plus the text metrics used to measure it.

    Attributes:
        root: The ``svg`` node.
        viewport: The ``g.viewport`` group, offset by the chart margins.
        font_scale: OpenCV font scale for label text.
        font_thickness: OpenCV font thickness for label text.
    """

    def __init__(
        self,
        outer_width: float = 0,
        outer_height: float = 0,
        font_scale: float = 0.5,
        font_thickness: int = 1,
        class_: str = 'chart-horizontal-bar'
    ) -> None:
        self.root: Node = Node('svg', class_)
        self.root.is_root = True
        self.root.attr({'width': outer_width, 'height': outer_height})
        self.viewport: Node = self.root.append('g', 'viewport')
        self.font_scale: float = font_scale
        self.font_thickness: int = font_thickness
        self._keyed: Dict[str, Node] = {}

    def ensure_node(self, key: str, factory: Callable[[], Node], selector: Optional[str] = None) -> Node:
        """Look up a node by a stable identity key, creating it only if missing.

        Args:
            key: Identity key of the node.
            factory: Creates and places the node when it does not exist yet.
            selector: Optional selector used to adopt a node created elsewhere.

        Returns:
            The existing or newly created node.
        """
        node = self._keyed.get(key)
        if node is not None and node.attached:
            return node

        node = self.root.select(selector) if selector else None
        if node is None:
            node = factory()
        self._keyed[key] = node
        return node

    def measure_text(self, node: Optional[Node]) -> float:
        """Rendered pixel width of a placed text node.

        Returns:
            The width, or 0 for a missing, detached or empty node.
        """
        if node is None or not node.text_content or not node.attached:
            return 0
        text_w, _ = get_text_dimensions(node.text_content, self.font_scale, self.font_thickness)
        return text_w

    # --- SVG output ---

    def to_svg(self) -> str:
        """Serialize the tree as an SVG document."""
        lines: List[str] = []
        self._serialize(self.root, 0, lines)
        return '\n'.join(lines) + '\n'

    def _serialize(self, node: Node, depth: int, lines: List[str]) -> None:
        indent = '  ' * depth
        attrs: List[str] = []
        if node is self.root:
            attrs.append(f'xmlns="{SVG_NS}"')
        if node.classes:
            attrs.append(f'class="{html.escape(" ".join(node.classes))}"')
        for name, value in node.attrs.items():
            if value is None:
                continue
            text = fmt_num(value) if isinstance(value, (int, float)) else str(value)
            attrs.append(f'{name}="{html.escape(text)}"')

        open_tag = ' '.join([node.tag] + attrs)
        if node.children:
            lines.append(f"{indent}<{open_tag}>")
            for child in node.children:
                self._serialize(child, depth + 1, lines)
            lines.append(f"{indent}</{node.tag}>")
        elif node.text_content:
            lines.append(f"{indent}<{open_tag}>{html.escape(node.text_content, quote=False)}</{node.tag}>")
        else:
            lines.append(f"{indent}<{open_tag}/>")

    def save_svg(self, file_path: str) -> None:
        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(self.to_svg())

    # --- Raster output ---

    def rasterize(self) -> np.ndarray:
        """Draw the tree onto a new canvas.

        Returns:
            BGR image of the chart.
        """
        width = int(math.ceil(float(self.root.get('width') or 0)))
        height = int(math.ceil(float(self.root.get('height') or 0)))
        canvas = start_canvas(width, height)
        self._draw_node(canvas, self.root, 0.0, 0.0)
        return canvas

    def _draw_node(self, canvas: np.ndarray, node: Node, origin_x: float, origin_y: float) -> None:
        dx, dy = parse_translate(node.get('transform'))
        x0 = origin_x + dx
        y0 = origin_y + dy

        if node.tag == 'rect':
            self._draw_rect(canvas, node, x0, y0)
        elif node.tag == 'line':
            self._draw_line(canvas, node, x0, y0)
        elif node.tag == 'text':
            self._draw_text(canvas, node, x0, y0)

        for child in node.children:
            self._draw_node(canvas, child, x0, y0)

    def _fill_color(self, node: Node) -> Tuple[int, int, int]:
        fill = node.styles().get('fill', node.get('fill'))
        color = parse_color(fill)
        if color is None:
            if fill:
                logger.warning(f"Unrecognised fill colour '{fill}', drawing in black")
            return FONT_COLOR
        return color

    def _draw_rect(self, canvas: np.ndarray, node: Node, x0: float, y0: float) -> None:
        w = float(node.get('width') or 0)
        h = float(node.get('height') or 0)
        if w <= 0 or h <= 0:
            return
        x = x0 + float(node.get('x') or 0)
        y = y0 + float(node.get('y') or 0)
        cv2.rectangle(
            canvas,
            (int(round(x)), int(round(y))),
            (int(round(x + w)) - 1, int(round(y + h)) - 1),
            self._fill_color(node),
            -1
        )

    def _draw_line(self, canvas: np.ndarray, node: Node, x0: float, y0: float) -> None:
        cv2.line(
            canvas,
            (int(round(x0 + float(node.get('x1') or 0))), int(round(y0 + float(node.get('y1') or 0)))),
            (int(round(x0 + float(node.get('x2') or 0))), int(round(y0 + float(node.get('y2') or 0)))),
            parse_color(node.get('stroke')) or LINE_COLOR,
            1
        )

    def _draw_text(self, canvas: np.ndarray, node: Node, x0: float, y0: float) -> None:
        if not node.text_content:
            return
        text_w, text_h = get_text_dimensions(node.text_content, self.font_scale, self.font_thickness)
        x = x0 + float(node.get('x') or 0)
        y = y0 + float(node.get('y') or 0)

        anchor = node.get('text-anchor')
        if anchor == 'end':
            x -= text_w
        elif anchor == 'middle':
            x -= text_w / 2
        # '.35em' drops the baseline to centre the text on y
        if node.get('dy'):
            y += text_h / 2

        cv2.putText(
            canvas,
            node.text_content,
            (int(round(x)), int(round(y))),
            FONT,
            self.font_scale,
            FONT_COLOR,
            self.font_thickness,
            cv2.LINE_AA
        )

    def to_png(self) -> bytes:
        """Encode the raster preview as PNG bytes."""
        ok, buffer = cv2.imencode('.png', self.rasterize())
        if not ok:
            raise ValueError("Failed to encode chart as PNG")
        return buffer.tobytes()

    def save_png(self, file_path: str) -> None:
        """Save the raster preview to specified file path."""
        cv2.imwrite(file_path, self.rasterize())
