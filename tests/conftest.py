"""
Shared fixtures for Quilt Block Editor tests.

Provides deterministic id generators, fresh designers, and small sample
blocks and patterns.
"""
import sys
import os
import pytest

# Ensure editor/src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'editor', 'src'))


@pytest.fixture
def ids():
    """Deterministic id generator: 'id-1', 'id-2', ..."""
    from utils.id_generator import SequentialIdGenerator
    return SequentialIdGenerator('id')


@pytest.fixture
def block_designer(ids):
    """Fresh BlockDesigner on the default 3x3 grid"""
    from models.block_designer import BlockDesigner
    return BlockDesigner(id_generator=ids)


@pytest.fixture
def pattern_designer(ids):
    """Fresh PatternDesigner on the default 4x4 grid"""
    from models.pattern_designer import PatternDesigner
    return PatternDesigner(id_generator=ids)


@pytest.fixture
def square_block():
    """2x2 block: feature square, hst, and a flying geese along the bottom row"""
    from models.document import Block
    from models.transform import GridPosition, Span
    from models.unit import FlyingGeeseUnit, HstUnit, SquareUnit
    return Block(
        id='block-1',
        title='Sample',
        grid_size=2,
        units=(
            SquareUnit(id='sq', position=GridPosition(0, 0), span=Span(1, 1), fabric_role='feature'),
            HstUnit(id='hst', position=GridPosition(0, 1), span=Span(1, 1),
                    fabric_role='accent1', secondary_fabric_role='background', variant='ne'),
            FlyingGeeseUnit(id='fg', position=GridPosition(1, 0), span=Span(1, 2), direction='right',
                            patch_fabric_roles={'goose': 'feature', 'sky1': 'background',
                                                'sky2': 'background'}),
        ),
    )
