import pytest
import warp as wp

wp.config.quiet = True
wp.init()


@pytest.fixture
def device():
    """Tests run on the CPU so they do not need a GPU."""
    return "cpu"
