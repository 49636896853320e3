"""
Studio Ghibli Fan Site

Loads the consolidated API backup, resolves the relations between films,
species, people, locations and vehicles, and renders the site pages. The same
renderers back the local preview server below and the static build in
build_static.py.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import pandas as pd
from flask import Flask, abort, jsonify, render_template

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Paths
ROOT = Path(__file__).resolve().parent
DATA_DIR = ROOT / "data"
PUBLIC_DIR = ROOT / "public"
DIST_DIR = ROOT / "dist"
BACKUP_FILE = DATA_DIR / "complete-backup.json"

# Site constants
SITE_TITLE = "Studio Ghibli Films"
SITE_DESCRIPTION = "Explore Studio Ghibli films: titles, years, directors and more."
HOME_DEPTH = 0
DETAIL_DEPTH = 2  # film/<id>/index.html and species/<id>/index.html
BACKUP_COLLECTIONS = ("films", "species", "people", "locations", "vehicles")

UUID_PATTERN = re.compile(r"[0-9a-f-]{36}", re.IGNORECASE)

app = Flask(__name__, static_folder=str(PUBLIC_DIR), static_url_path="")


# ---------------------------------------------------------------------------
# Reference resolution
# ---------------------------------------------------------------------------

def id_from(value: Any) -> Optional[str]:
    """
    Resolve a relation field to a bare id.

    Accepts an embedded object carrying ``id``, a URL/path containing a UUID,
    or a string that already is an id.
    """
    if not value:
        return None
    if isinstance(value, dict):
        return value.get("id") or None
    value = str(value)
    match = UUID_PATTERN.search(value)
    return match.group(0) if match else value


def id_list(values: Any) -> list[str]:
    """Resolve a list of relation fields, dropping entries without an id."""
    if not isinstance(values, list):
        return []
    return [i for i in (id_from(v) for v in values) if i]


def load_backup(path: Path = BACKUP_FILE) -> dict[str, list[dict]]:
    """Read complete-backup.json. Missing collections default to empty lists."""
    with open(path, "r", encoding="utf-8") as f:
        backup = json.load(f)
    return {name: backup.get(name) or [] for name in BACKUP_COLLECTIONS}


def _resolve_film(film: dict) -> dict:
    resolved = dict(film)
    for key in ("people", "species", "locations", "vehicles"):
        resolved[key] = id_list(film.get(key))
    return resolved


def _resolve_species(species: dict) -> dict:
    resolved = dict(species)
    if "films" in species:
        resolved["films"] = id_list(species.get("films"))
    return resolved


def _resolve_person(person: dict) -> dict:
    resolved = dict(person)
    resolved["species"] = id_from(person.get("species"))
    return resolved


def _name_key(record: dict) -> str:
    return str(record.get("name") or "")


@dataclass
class SiteData:
    """Records and lookup indexes for one build run. Relations hold bare ids only."""

    films: list[dict] = field(default_factory=list)
    species: list[dict] = field(default_factory=list)
    people: list[dict] = field(default_factory=list)
    locations: list[dict] = field(default_factory=list)
    vehicles: list[dict] = field(default_factory=list)

    def __post_init__(self):
        self.films_by_id = {f.get("id"): f for f in self.films}
        self.species_by_id = {s.get("id"): s for s in self.species}
        self.people_by_id = {p.get("id"): p for p in self.people}
        self.locations_by_id = {loc.get("id"): loc for loc in self.locations}
        self.vehicles_by_id = {v.get("id"): v for v in self.vehicles}

        self.people_by_species: dict[str, list[dict]] = {}
        for person in self.people:
            if person.get("species"):
                self.people_by_species.setdefault(person["species"], []).append(person)
        for group in self.people_by_species.values():
            group.sort(key=_name_key)

    @classmethod
    def from_backup(cls, backup: dict[str, list[dict]]) -> "SiteData":
        return cls(
            films=[_resolve_film(f) for f in backup.get("films", [])],
            species=[_resolve_species(s) for s in backup.get("species", [])],
            people=[_resolve_person(p) for p in backup.get("people", [])],
            locations=list(backup.get("locations", [])),
            vehicles=list(backup.get("vehicles", [])),
        )

    def films_by_year(self) -> list[dict]:
        """
        Films ordered by numeric release year, ascending.

        Years that don't parse as numbers sort last, keeping their input order.
        """
        if not self.films:
            return []
        years = pd.to_numeric(
            pd.Series([f.get("release_date") for f in self.films], dtype=object),
            errors="coerce",
        )
        order = years.sort_values(kind="mergesort", na_position="last").index
        return [self.films[i] for i in order]

    def films_for_species(self, species: dict) -> list[dict]:
        """
        Films featuring *species*.

        Uses the species' own film list when it has one; otherwise scans every
        film's species ids. The scan is O(species x films), fine at this size.
        """
        film_ids = species.get("films") or []
        if film_ids:
            return [f for f in self.films if f.get("id") in film_ids]
        return [f for f in self.films if species.get("id") in f.get("species", [])]

    def characters_for_film(self, film: dict) -> list[dict]:
        return [self.people_by_id[i] for i in film.get("people", []) if i in self.people_by_id]

    def characters_for_species(self, species: dict) -> list[dict]:
        return self.people_by_species.get(species.get("id"), [])

    def species_for_person(self, person: dict) -> Optional[dict]:
        return self.species_by_id.get(person.get("species"))

    def tag_names(self, ids: list[str], index: dict[str, dict]) -> list[str]:
        """Names of the records in *index* that *ids* resolve to."""
        return [index[i]["name"] for i in ids if i in index and index[i].get("name")]

    def to_dict(self) -> dict[str, list[dict]]:
        return {name: getattr(self, name) for name in BACKUP_COLLECTIONS}


# ---------------------------------------------------------------------------
# Template helpers
# ---------------------------------------------------------------------------

@app.template_global()
def prefix_for_depth(depth: int = 0) -> str:
    """``"../"`` repeated *depth* times; empty at the site root."""
    return "" if depth <= 0 else "../" * depth


@app.template_global()
def asset(path: str = "", depth: int = 0) -> str:
    """Relative path to a file in the output root from a page *depth* levels down."""
    return prefix_for_depth(depth) + str(path).lstrip("/")


@app.template_filter()
def cap(value: Any) -> str:
    if not value:
        return ""
    return " ".join(w[0].upper() + w[1:].lower() if w else "" for w in str(value).split(" "))


@app.template_filter()
def initials(name: Any) -> str:
    """First and last initial, uppercased. A one-word name gives one letter."""
    if not name or not str(name).strip():
        return "?"
    parts = str(name).split()
    letters = parts[0][0] + (parts[-1][0] if len(parts) > 1 else "")
    return letters.upper()


@app.template_filter()
def avatar_class(gender: Any) -> str:
    g = str(gender or "").lower()
    if g == "female":
        return "avatar-female"
    if g == "male":
        return "avatar-male"
    return "avatar-neutral"


@app.template_filter()
def hero_class(classification: Any) -> str:
    """Species hero banner variant, picked by keywords in the classification."""
    c = str(classification or "").lower()
    if "mammal" in c:
        return "species-hero-mammal"
    if "spirit" in c or "god" in c:
        return "species-hero-spirit"
    if "bird" in c or "avian" in c:
        return "species-hero-bird"
    return "species-hero-default"


@app.template_test()
def present(value: Any) -> bool:
    """True for values that are set and not blank."""
    return value is not None and str(value).strip() != ""


def card_image(film: dict) -> str:
    return film.get("image") or film.get("movie_banner") or ""


def banner_image(film: dict) -> str:
    return film.get("movie_banner") or film.get("image") or ""


def film_href(film: dict) -> str:
    href = film.get("href")
    return href.lstrip("/") if href else f"film/{film['id']}/"


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------

def _render(template: str, **context) -> str:
    with app.app_context():
        return render_template(template, **context)


def render_home(site: SiteData) -> str:
    """Home page: one card per film, oldest first."""
    cards = []
    for film in site.films_by_year():
        cards.append({
            "film": film,
            "href": film_href(film),
            "poster": card_image(film),
            "runtime": f"{film['running_time']} mins" if film.get("running_time") else "",
        })
    return _render(
        "home.html",
        title=SITE_TITLE,
        description=SITE_DESCRIPTION,
        depth=HOME_DEPTH,
        header="home",
        decorations=True,
        cards=cards,
    )


def _character_rows(site: SiteData, people: list[dict], with_species: bool) -> list[dict]:
    rows = []
    for person in people:
        species = site.species_for_person(person) if with_species else None
        rows.append({
            "person": person,
            "species_id": species["id"] if species else None,
            "species_name": (species.get("name") or "") if species else "",
        })
    return rows


def render_film(film: dict, site: SiteData) -> str:
    """Film detail page: facts, characters and related locations/species/vehicles."""
    characters = site.characters_for_film(film)
    tag_sections = [
        ("Locations", site.tag_names(film.get("locations", []), site.locations_by_id)),
        ("Species", site.tag_names(film.get("species", []), site.species_by_id)),
        ("Vehicles", site.tag_names(film.get("vehicles", []), site.vehicles_by_id)),
    ]
    title = film.get("title") or ""
    description = title
    if film.get("release_date"):
        description += f" ({film['release_date']})"
    if film.get("director"):
        description += f" by {film['director']}"
    return _render(
        "film.html",
        title=f"{title} - Studio Ghibli",
        description=description,
        depth=DETAIL_DEPTH,
        header="detail",
        decorations=False,
        film=film,
        banner=banner_image(film),
        characters=_character_rows(site, characters, with_species=True),
        tag_sections=tag_sections,
    )


def render_species(species: dict, site: SiteData) -> str:
    """Species detail page: classification facts, its characters and its films."""
    name = species.get("name") or ""
    return _render(
        "species.html",
        title=f"{name} - Species",
        description=f"Characters and films for the {name} species from Studio Ghibli films.",
        depth=DETAIL_DEPTH,
        header="species",
        decorations=False,
        species=species,
        characters=_character_rows(site, site.characters_for_species(species), with_species=False),
        films=site.films_for_species(species),
    )


# ---------------------------------------------------------------------------
# Preview server
# ---------------------------------------------------------------------------

@lru_cache(maxsize=1)
def get_site_data() -> SiteData:
    logger.info(f"Loading {BACKUP_FILE}")
    return SiteData.from_backup(load_backup(BACKUP_FILE))


@app.route("/")
def index():
    """Serve the home page."""
    return render_home(get_site_data())


@app.route("/film/<film_id>/")
def film_page(film_id: str):
    site = get_site_data()
    film = site.films_by_id.get(film_id)
    if film is None:
        abort(404)
    return render_film(film, site)


@app.route("/species/<species_id>/")
def species_page(species_id: str):
    site = get_site_data()
    species = site.species_by_id.get(species_id)
    if species is None:
        abort(404)
    return render_species(species, site)


@app.route("/api/data")
def api_data():
    """Return the loaded backup, relations resolved to ids, as JSON."""
    try:
        return jsonify(get_site_data().to_dict())
    except Exception as e:
        logger.error(f"Error loading data: {e}")
        return jsonify({"error": str(e)}), 500


if __name__ == "__main__":
    app.run(host="127.0.0.1", port=8080, debug=True)
