import logging
import shutil
import sys
from pathlib import Path

import minify_html

from app import (
    BACKUP_FILE,
    DIST_DIR,
    PUBLIC_DIR,
    SiteData,
    load_backup,
    render_film,
    render_home,
    render_species,
)

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def minify(html: str) -> str:
    """Collapse whitespace, drop comments and minify inline CSS."""
    return minify_html.minify(html, minify_css=True, keep_comments=False)


def write_html(path: Path, html: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(minify(html), encoding="utf-8")


def build(data_file=BACKUP_FILE, public_dir=PUBLIC_DIR, dist_dir=DIST_DIR) -> list[Path]:
    """Build the static site into dist_dir. Returns the pages written."""
    dist_dir = Path(dist_dir)

    logger.info(f"Loading {data_file}...")
    site = SiteData.from_backup(load_backup(data_file))

    logger.info(f"Copying {public_dir} to {dist_dir}...")
    shutil.rmtree(dist_dir, ignore_errors=True)
    shutil.copytree(public_dir, dist_dir)

    pages = []
    index = dist_dir / "index.html"
    write_html(index, render_home(site))
    pages.append(index)

    for film in site.films:
        page = dist_dir / "film" / film["id"] / "index.html"
        write_html(page, render_film(film, site))
        pages.append(page)

    for species in site.species:
        page = dist_dir / "species" / species["id"] / "index.html"
        write_html(page, render_species(species, site))
        pages.append(page)

    logger.info(f"Wrote {len(pages)} pages ({len(site.films)} films, {len(site.species)} species)")
    return pages


def main():
    try:
        build()
        logger.info(f"Build complete, {DIST_DIR.name}/")
    except Exception as e:
        logger.exception(f"Build failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
