"""
Pytest configuration and fixtures for encodingman tests
"""

import codecs
import pytest

from encodingman.config import PipelineConfig
from encodingman.tempfiles import TempFileManager

from samples import JP_CSV, JP_TEXT, nul_free_noise


@pytest.fixture
def work_dir(tmp_path):
    """Directory holding the input files of a test."""
    d = tmp_path / "in"
    d.mkdir()
    return d


@pytest.fixture
def temp_manager(tmp_path):
    """Temp-file manager writing under the test's tmp_path."""
    return TempFileManager(tmp_path / "out")


@pytest.fixture
def config():
    """Default pipeline settings: convert to UTF-8 with BOM."""
    return PipelineConfig.create()


@pytest.fixture
def sjis_csv(work_dir):
    path = work_dir / "customers.csv"
    path.write_bytes(JP_CSV.encode("cp932"))
    return path


@pytest.fixture
def utf8_bom_txt(work_dir):
    path = work_dir / "notes.txt"
    path.write_bytes(codecs.BOM_UTF8 + JP_TEXT.encode("utf-8"))
    return path


@pytest.fixture
def xlsx_file(work_dir):
    # content is deliberately plain text: the extension alone decides
    path = work_dir / "sheet.xlsx"
    path.write_bytes("見出し,値\r\n".encode("cp932"))
    return path


@pytest.fixture
def corrupted_csv(work_dir):
    # present on disk but not text in any encoding
    path = work_dir / "corrupted.csv"
    path.write_bytes(nul_free_noise(4096))
    return path
