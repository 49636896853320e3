"""Shared fixtures: a small backup with one of every relation shape."""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app import SiteData

CASTLE_ID = "2baf70d1-42bb-4437-b551-e5fed5a87abe"
TOTORO_FILM_ID = "58611129-2dbc-4a81-a72f-77ddfc1b1b49"
UNDATED_FILM_ID = "0440483e-ca0e-4120-8c50-4c8cd9b965d6"
HUMAN_ID = "af3910a6-429f-4c74-9ad5-dfe1c4aa04f2"
SPIRIT_ID = "74b7f547-1577-4430-806c-c358c8b6bcf5"
CAT_ID = "603428ba-8a86-4b0b-a9f1-65df6abef3d3"
PAZU_ID = "598f7048-74ff-41e0-92ef-87dc1ad980a9"
SATSUKI_ID = "986faac6-67e3-4fb8-a9ee-bad077c2e7fe"
TOTORO_ID = "d5df3c04-f355-4038-833c-83bd3502b6b9"
MISSING_PERSON_ID = "00000000-0000-4000-8000-000000000000"
LAPUTA_ID = "6cd4a1b9-1c6f-4e8a-9a1c-4a8e5c1c2f11"
GOLIATH_ID = "4e09b023-f650-4747-9ab9-eacf14540cfb"


@pytest.fixture
def backup():
    return {
        "films": [
            {
                "id": TOTORO_FILM_ID,
                "title": "My Neighbor Totoro",
                "original_title": "となりのトトロ",
                "original_title_romanised": "Tonari no Totoro",
                "movie_banner": "images/totoro-banner.jpg",
                "description": "Two sisters move to the country.",
                "director": "Hayao Miyazaki",
                "producer": "Hayao Miyazaki",
                "release_date": "1988",
                "running_time": "86",
                "rt_score": "93",
                "people": [
                    f"https://ghibliapi.vercel.app/people/{SATSUKI_ID}",
                    {"id": TOTORO_ID},
                    MISSING_PERSON_ID,
                ],
                "species": [f"https://ghibliapi.vercel.app/species/{HUMAN_ID}", SPIRIT_ID],
                "locations": ["https://ghibliapi.vercel.app/locations/"],
            },
            {
                "id": CASTLE_ID,
                "title": "Castle in the Sky",
                "image": "images/laputa-poster.jpg",
                "release_date": "1986",
                "director": "Hayao Miyazaki",
                "people": [PAZU_ID],
                "species": [HUMAN_ID],
                "locations": [LAPUTA_ID],
                "vehicles": [{"id": GOLIATH_ID}],
            },
            {
                "id": UNDATED_FILM_ID,
                "title": "Untitled Project",
                "release_date": "TBA",
            },
        ],
        "species": [
            {
                "id": HUMAN_ID,
                "name": "Human",
                "classification": "Mammal",
                "eye_colors": "Black, Brown",
                "hair_colors": "Black, Brown",
            },
            {"id": SPIRIT_ID, "name": "Totoro", "classification": "Spirit"},
            {
                "id": CAT_ID,
                "name": "Cat",
                "classification": "Mammal",
                "films": [f"https://ghibliapi.vercel.app/films/{CASTLE_ID}"],
            },
        ],
        "people": [
            {"id": SATSUKI_ID, "name": "Satsuki Kusakabe", "gender": "Female", "age": "11",
             "eye_color": "dark brown", "hair_color": "", "species": {"id": HUMAN_ID}},
            {"id": PAZU_ID, "name": "Pazu", "gender": "MALE", "age": "13",
             "species": f"https://ghibliapi.vercel.app/species/{HUMAN_ID}"},
            {"id": TOTORO_ID, "name": "Totoro", "gender": "NA", "age": "1300", "species": SPIRIT_ID},
        ],
        "locations": [{"id": LAPUTA_ID, "name": "Laputa"}],
        "vehicles": [{"id": GOLIATH_ID, "name": "Goliath"}],
    }


@pytest.fixture
def site(backup):
    return SiteData.from_backup(backup)
