"""Page discovery: a single page file, or every page of a Logseq graph."""

import pathlib


def find_page_files(path: pathlib.Path) -> list[pathlib.Path]:
    """Resolve a CLI path argument into the page files it names.

    A file is returned as-is. A directory must be a graph root, i.e. have a
    `pages/` subdirectory; its `*.md` files are returned sorted by name.
    """
    path = path.resolve()
    if not path.exists():
        raise FileNotFoundError(f"{path} does not exist")
    if path.is_file():
        return [path]
    pages_dir = path / "pages"
    if not pages_dir.is_dir():
        raise FileNotFoundError(
            f"{path} is a directory without a pages subdirectory, expected a Logseq graph root")
    return sorted(p for p in pages_dir.iterdir() if p.is_file() and p.suffix == ".md")
