import pytest

from gameplan.tree import PositionTreeBuilder


@pytest.fixture(scope="session")
def built():
    """A builder with the full tree already expanded, plus its table."""
    builder = PositionTreeBuilder()
    moves = builder.get_recommended_moves()
    return builder, moves
