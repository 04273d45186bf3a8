import pytest
from PIL import Image


@pytest.fixture
def sample_image(tmp_path):
    path = tmp_path / "profile.png"
    Image.new("RGB", (200, 100), "white").save(path)
    return path
