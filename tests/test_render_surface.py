"""Tests for the render surface: tree operations, measurement and output."""

import numpy as np
import pytest

from hbarchart.render_surface import (
    Node,
    RenderSurface,
    fmt_num,
    parse_color,
    parse_translate,
)


def test_select_all_matches_tag_and_class_chains() -> None:
    surface = RenderSurface()
    axis = surface.viewport.insert_first('g', 'y axis')
    line = axis.append('line')
    bar = surface.viewport.append('g', 'bar')
    bar.append('text', 'value')
    bar.append('line')

    assert surface.root.select_all('.y.axis line') == [line]
    assert surface.viewport.select_all('g.bar') == [bar]
    assert surface.viewport.children[0] is axis
    assert [n.tag for n in surface.root.select_all('line')] == ['line', 'line']
    assert surface.root.select('.missing') is None


def test_attr_invokes_callables_with_bound_datum() -> None:
    node = Node('rect')
    node.datum = {'value': 4}
    node.index = 2
    node.attr({'width': lambda d, i: d['value'] * 10, 'height': 5, 'y': lambda d, i: i})

    assert node.attrs == {'width': 40, 'height': 5, 'y': 2}


def test_style_merges_declarations() -> None:
    node = Node('rect')
    node.datum = {'color': '#123456'}
    node.attr({'style': 'stroke:none'})

    node.style('fill', lambda d, i: d['color']).style('opacity', 0.5)
    assert node.get('style') == 'stroke:none;fill:#123456;opacity:0.5'

    node.style('fill', 'red').style('stroke', None)
    assert node.styles() == {'fill': 'red', 'opacity': '0.5'}

    node.style('fill', None).style('opacity', None)
    assert node.get('style') is None


def test_classed_and_remove() -> None:
    surface = RenderSurface()
    group = surface.viewport.append('g', 'bar')
    group.classed('hovered', True).classed('hovered', True)

    assert group.classes == ['bar', 'hovered']
    group.classed('hovered', False)
    assert not group.has_class('hovered')

    group.remove()
    assert surface.viewport.children == []
    assert not group.attached


def test_dispatch_calls_handler_with_datum_index_and_node() -> None:
    node = Node('g')
    node.datum = {'label': 'A'}
    node.index = 3
    calls = []
    node.on('mouseover', lambda d, i, element: calls.append((d, i, element)))

    node.dispatch('mouseover')
    assert calls == [({'label': 'A'}, 3, node)]
    assert node.dispatch('mouseout') is None


def test_ensure_node_reuses_existing_node() -> None:
    surface = RenderSurface()
    created = []

    def factory() -> Node:
        node = surface.viewport.insert_first('g', 'y axis').append('line')
        created.append(node)
        return node

    first = surface.ensure_node('axis', factory)
    second = surface.ensure_node('axis', factory)

    assert first is second
    assert len(created) == 1


def test_ensure_node_adopts_node_found_by_selector() -> None:
    surface = RenderSurface()
    existing = surface.viewport.insert_first('g', 'y axis').append('line')

    node = surface.ensure_node('axis', lambda: pytest.fail("factory should not run"), selector='.y.axis line')
    assert node is existing


def test_measure_text_of_placed_text() -> None:
    surface = RenderSurface(font_scale=0.5, font_thickness=1)
    short = surface.viewport.append('text').text('ab')
    long = surface.viewport.append('text').text('abcdefgh')

    assert 0 < surface.measure_text(short) < surface.measure_text(long)


def test_measure_text_is_zero_for_empty_or_detached_nodes() -> None:
    surface = RenderSurface()

    assert surface.measure_text(surface.viewport.append('text')) == 0
    assert surface.measure_text(Node('text').text('detached')) == 0
    assert surface.measure_text(None) == 0


def test_to_svg_escapes_text_and_formats_numbers() -> None:
    surface = RenderSurface(outer_width=100, outer_height=50)
    surface.viewport.append('text', 'group').attr({'x': 1.5, 'y': 2.0}).text('R&D <east>')
    surface.viewport.append('rect').attr({'width': 10, 'style': 'fill:#000'})

    svg = surface.to_svg()

    assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg" class="chart-horizontal-bar"')
    assert '<text class="group" x="1.5" y="2">R&amp;D &lt;east&gt;</text>' in svg
    assert '<rect width="10" style="fill:#000"/>' in svg
    assert svg.rstrip().endswith('</svg>')


def test_rasterize_fills_rects_at_translated_positions() -> None:
    surface = RenderSurface(outer_width=40, outer_height=30)
    surface.viewport.attr({'transform': 'translate(5, 5)'})
    group = surface.viewport.append('g').attr({'transform': 'translate(10, 0)'})
    group.append('rect').attr({'width': 10, 'height': 10}).style('fill', 'rgb(255, 0, 0)')

    canvas = surface.rasterize()

    assert canvas.shape == (30, 40, 3)
    assert canvas[10, 20].tolist() == [0, 0, 255]
    assert canvas[2, 2].tolist() == [255, 255, 255]


def test_to_png_produces_png_bytes() -> None:
    surface = RenderSurface(outer_width=20, outer_height=20)
    surface.viewport.append('text').attr({'x': 2, 'y': 10}).text('hi')

    assert surface.to_png().startswith(b'\x89PNG')


@pytest.mark.parametrize(
    "color, expected",
    [
        ('#ff0000', (0, 0, 255)),
        ('#0f0', (0, 255, 0)),
        ('rgb(65, 65, 70)', (70, 65, 65)),
        ('steelblue', (180, 130, 70)),
        ('nonsense', None),
        ('#12', None),
        (None, None),
    ],
)
def test_parse_color(color, expected) -> None:
    assert parse_color(color) == expected


def test_parse_translate() -> None:
    assert parse_translate('translate(36.375, 11)') == (36.375, 11)
    assert parse_translate('translate(-4 2)') == (-4, 2)
    assert parse_translate(None) == (0, 0)


@pytest.mark.parametrize(
    "value, expected",
    [(3, '3'), (3.0, '3'), (-0.0, '0'), (2.5, '2.5'), (1 / 3, '0.333333'), (np.float64(4.25), '4.25')],
)
def test_fmt_num(value, expected) -> None:
    assert fmt_num(value) == expected
