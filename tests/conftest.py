import pytest


@pytest.fixture
def png_path(tmp_path):
    '''A real 5x5 red image, as saved by Pillow.'''
    from PIL import Image

    path = tmp_path / 'red.png'
    Image.new('RGB', (5, 5), 'red').save(path, 'PNG')

    return path
