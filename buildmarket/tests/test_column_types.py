import json

import pytest

from buildmarket.column_types import decode_list


@pytest.mark.parametrize(
    "stored, expected",
    [
        (None, []),
        ("", []),
        ("null", []),
        ('["/api/files/a.png", "/api/files/b.png"]', ["/api/files/a.png", "/api/files/b.png"]),
        (json.dumps(json.dumps(["/api/files/a.png"])), ["/api/files/a.png"]),
        ("/api/files/a.png", ["/api/files/a.png"]),
        ('"/api/files/a.png"', ["/api/files/a.png"]),
        (["roofer"], ["roofer"]),
    ],
)
def test_decode_list(stored, expected):
    assert decode_list(stored) == expected
