import pytest

from ciptamandiri.slugs import generate_slug, timestamp_suffix


@pytest.mark.parametrize(
    "judul, expected",
    [
        ("Tips Membeli Rumah", "tips-membeli-rumah"),
        ("  Investasi   Properti 2024!  ", "investasi-properti-2024"),
        ("Rumah_Baru -- Jakarta", "rumah-baru-jakarta"),
        ("Café & Résidence", "cafe-residence"),
        ("KPR: Apa itu?", "kpr-apa-itu"),
    ],
)
def test_generate_slug(judul, expected):
    assert generate_slug(judul) == expected


def test_generate_slug_never_returns_a_bare_number():
    assert generate_slug("2024") == "artikel-2024"
    assert generate_slug("2024!") == "artikel-2024"
    assert generate_slug("Tren 2024") == "tren-2024"


def test_generate_slug_falls_back_when_nothing_is_left():
    assert generate_slug("!!!") == "artikel"
    assert generate_slug("") == "artikel"


def test_generate_slug_is_bounded():
    slug = generate_slug("kata " * 100)
    assert len(slug) <= 200
    assert not slug.endswith("-")


def test_timestamp_suffix_takes_last_six_digits():
    assert timestamp_suffix(1717000123456) == "123456"
    assert len(timestamp_suffix()) == 6
