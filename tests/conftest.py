import pytest

HEADER = "owner_name,owner_phone,contact_name,contact_phone,owner_location\n"


@pytest.fixture
def write_leak(tmp_path):
    """Write CSV text into a leak file and return its path as a string."""
    def _write(body: str, header: str = HEADER, name: str = "leak.csv") -> str:
        path = tmp_path / name
        path.write_text(header + body, encoding="utf-8")
        return str(path)
    return _write
