"""
Normalize the raw Ghibli API dumps in data/ into the shape the site builder expects.

Relation fields (full URLs, API paths or embedded objects) are reduced to bare
ids and image references are rewritten to local ``images/<basename>`` paths.
The three source files are overwritten in place.

Run with: python scripts/normalize_data.py
"""

import json
import logging
import posixpath
import re
import sys
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlparse

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# Constants
DATA_DIR = Path(__file__).resolve().parent.parent / "data"
SOURCE_FILES = ("films.json", "species.json", "people.json")
UUID_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE
)
URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


def strip_id(value: Any) -> Optional[str]:
    """
    Reduce a relation field to a bare id.

    • dict with an ``id`` key → that id
    • string containing a UUID (e.g. ``/api/people/<uuid>``) → the UUID
    • anything else → None
    """
    if not value:
        return None
    if isinstance(value, dict):
        return value.get("id") or None
    if not isinstance(value, str):
        return None
    match = UUID_PATTERN.search(value)
    return match.group(0) if match else None


def strip_ids(values: Any) -> list[str]:
    """Reduce a list of relation fields to ids, dropping the ones that don't resolve."""
    if not isinstance(values, list):
        return []
    return [i for i in (strip_id(v) for v in values) if i]


def to_local_image(src: Any) -> str:
    """Rewrite an image reference to ``images/<basename>``. Empty input gives ``""``."""
    if not src:
        return ""
    src = str(src)
    base = posixpath.basename(src)
    if URL_PATTERN.match(src):
        try:
            base = posixpath.basename(urlparse(src).path)
        except ValueError:
            # malformed URL (e.g. unbalanced IPv6 brackets): keep the plain basename
            pass
    return f"images/{base}"


def normalize_films(films: list[dict]) -> list[dict]:
    """Clean raw film records."""
    cleaned = []
    for f in films:
        cleaned.append({
            "id": f.get("id"),
            "href": f"film/{f.get('id')}/",
            "title": f.get("title"),
            "original_title": f.get("original_title"),
            "original_title_romanised": f.get("original_title_romanised"),
            "image": to_local_image(f.get("image")),
            "movie_banner": to_local_image(f.get("movie_banner")),
            "description": f.get("description"),
            "director": f.get("director"),
            "producer": f.get("producer"),
            "release_date": f.get("release_date"),
            "running_time": f.get("running_time"),
            "rt_score": f.get("rt_score"),
            "people": strip_ids(f.get("people")),
            "species": strip_ids(f.get("species")),
            "locations": strip_ids(f.get("locations")),
            "vehicles": strip_ids(f.get("vehicles")),
        })
    return cleaned


def normalize_species(species: list[dict]) -> list[dict]:
    """Clean raw species records. The legacy ``class`` key is folded into ``classification``."""
    cleaned = []
    for s in species:
        classification = s.get("classification")
        if classification is None:
            classification = s.get("class")
        record = {
            "id": s.get("id"),
            "href": f"species/{s.get('id')}/",
            "name": s.get("name"),
            "classification": classification if classification is not None else "",
            "eye_colors": s.get("eye_colors") if s.get("eye_colors") is not None else "",
            "hair_colors": s.get("hair_colors") if s.get("hair_colors") is not None else "",
        }
        if isinstance(s.get("films"), list):
            record["films"] = strip_ids(s["films"])
        cleaned.append(record)
    return cleaned


def _or_blank(value: Any) -> Any:
    return "" if value is None else value


def normalize_people(people: list[dict]) -> list[dict]:
    """Clean raw people records. Each person keeps a single species id (or None)."""
    cleaned = []
    for p in people:
        cleaned.append({
            "id": p.get("id"),
            "name": p.get("name"),
            "gender": _or_blank(p.get("gender")),
            "age": _or_blank(p.get("age")),
            "eye_color": _or_blank(p.get("eye_color")),
            "hair_color": _or_blank(p.get("hair_color")),
            "image": to_local_image(p.get("image") or ""),
            "species": strip_id(p.get("species")),
        })
    return cleaned


def read_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json(path: Path, data: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")


def normalize(data_dir: Path = DATA_DIR) -> dict[str, int]:
    """
    Normalize films.json, species.json and people.json in *data_dir* in place.

    Returns the number of records written per file. Read or parse errors
    propagate; nothing is written unless all three files load.
    """
    data_dir = Path(data_dir)
    films_path, species_path, people_path = (data_dir / name for name in SOURCE_FILES)

    films = read_json(films_path)
    species = read_json(species_path)
    people = read_json(people_path)

    outputs = {
        films_path: normalize_films(films),
        species_path: normalize_species(species),
        people_path: normalize_people(people),
    }
    for path, records in outputs.items():
        write_json(path, records)
        logger.info(f"Wrote {len(records)} records to {path.name}")

    return {path.name: len(records) for path, records in outputs.items()}


def main():
    try:
        normalize()
        logger.info("Normalized data, data/*.json")
        logger.info("Remember to place all used image files in public/images/")
    except Exception as e:
        logger.exception(f"Failed to normalize data: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
