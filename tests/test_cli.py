from PIL import Image

from chunkstash.cli import main
from chunkstash.images.png import PNGFile


def test_encode_decode(png_path, capsys):
    assert main(['encode', str(png_path), 'ruSt', 'this is a secret']) == 0

    assert main(['decode', str(png_path), 'ruSt']) == 0
    assert capsys.readouterr().out == 'this is a secret\n'

    # the image is still an image
    with Image.open(png_path) as image:
        assert image.size == (5, 5)
        image.load()


def test_encode_to_output(png_path, tmp_path):
    output = tmp_path / 'output.png'
    original = png_path.read_bytes()

    assert main(['encode', str(png_path), 'ruSt', 'kebab', '-o', str(output)]) == 0

    assert png_path.read_bytes() == original
    assert PNGFile(output).chunk_by_type('ruSt').data == b'kebab'


def test_decode_missing(png_path, capsys):
    assert main(['decode', str(png_path), 'ruSt']) == 0
    assert capsys.readouterr().out == 'No secret found :(\n'


def test_remove(png_path):
    original = png_path.read_bytes()

    assert main(['encode', str(png_path), 'ruSt', 'this is a secret']) == 0
    assert png_path.read_bytes() != original

    assert main(['remove', str(png_path), 'ruSt']) == 0
    assert png_path.read_bytes() == original


def test_remove_missing(png_path, capsys):
    original = png_path.read_bytes()

    assert main(['remove', str(png_path), 'ruSt']) == 1
    assert 'chunk ruSt not found' in capsys.readouterr().err
    assert png_path.read_bytes() == original


def test_print(png_path, capsys):
    assert main(['encode', str(png_path), 'ruSt', 'this is a secret']) == 0
    assert main(['print', str(png_path)]) == 0

    out = capsys.readouterr().out

    assert 'IHDR' in out
    assert "ruSt length=16" in out
    assert "data='this is a secret'" in out


def test_invalid_chunk_type(png_path, capsys):
    assert main(['encode', str(png_path), 'Ru1t', 'nope']) == 1
    assert 'error:' in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    path = tmp_path / 'missing.png'

    assert main(['print', str(path)]) == 1
    assert str(path) in capsys.readouterr().err


def test_not_a_png(tmp_path, capsys):
    path = tmp_path / 'text.png'
    path.write_bytes(b'I am not an image, really')

    assert main(['decode', str(path), 'ruSt']) == 1
    assert 'bad signature' in capsys.readouterr().err


def test_encode_non_utf8_message(png_path, capsys):
    """Bytes of the command line that aren't UTF-8 are stored as they are."""
    message = b'\xff\xfe'.decode('utf-8', 'surrogateescape')

    assert main(['encode', str(png_path), 'ruSt', message]) == 0
    assert PNGFile(png_path).chunk_by_type('ruSt').data == b'\xff\xfe'

    assert main(['decode', str(png_path), 'ruSt']) == 1
    assert 'not valid text' in capsys.readouterr().err
