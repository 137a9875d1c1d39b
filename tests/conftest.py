import pytest

from karacho import Karacho, KarachoOptions


@pytest.fixture
def engine() -> Karacho:
    """Свежий движок со стандартными опциями."""
    return Karacho()


@pytest.fixture
def strict_engine() -> Karacho:
    """Движок, в котором отсутствующие значения вызывают ошибку."""
    return Karacho(KarachoOptions(strict=True))


@pytest.fixture
def write_yaml(tmp_path):
    """Фабрика YAML-файлов во временной директории."""
    def _write(name: str, text: str):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
