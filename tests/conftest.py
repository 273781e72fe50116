"""Test configuration ensuring local packages are importable, plus filesystem fixtures."""

from __future__ import annotations

import os
import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

for path in (SRC, ROOT):
    path_str = str(path)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from treeglob import DirMatch, ErrorMatch, FileMatch, GlobSearch  # noqa: E402

PRODUCE_FILES = {
    "fruits et légumes.txt": "Des fruits et des légumes",
    "info": "Information",
    "fruits/pomme.txt": "Pomme",
    "fruits/poire.txt": "Poire",
    "fruits/ananas.txt": "Ananas",
    "fruits/tomate.txt": "Tomate",
    "légumes/épinard.txt": "Épinard",
    "légumes/tomate.txt": "Tomate",
    "légumes/pomme.de.terre.txt": "Pomme de terre",
}

UNICODE_FILES = {
    "我爱你/你好世界.txt": "Hello world",
    "我爱你/tomate.txt": "Hello Tomate",
    "我爱你/Ƥḭҽɾɾҽ ѵìǫłҽղէ/tomate.txt": "Hello Tomate",
    "我爱你/Ƥḭҽɾɾҽ ѵìǫłҽղէ/Aé♫山𝄞🐗.txt": "Random 1",
    "我爱你/Ƥḭҽɾɾҽ ѵìǫłҽղէ/œæĳøß≤≠Ⅷﬁﬆ.txt": "Random 2",
}


def make_tree(base: pathlib.Path, files: dict[str, str]) -> pathlib.Path:
    for relative, content in files.items():
        target = base / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return base


def count(search: GlobSearch) -> tuple[int, int]:
    """Number of (files, dirs) a search yields; errors are ignored."""
    files = dirs = 0
    for result in search.explore():
        if isinstance(result, FileMatch):
            files += 1
        elif isinstance(result, DirMatch):
            dirs += 1
        else:
            assert isinstance(result, ErrorMatch)
    return files, dirs


@pytest.fixture(scope="session")
def produce_tree(tmp_path_factory: pytest.TempPathFactory) -> pathlib.Path:
    """Two produce folders plus two loose files: 8 ``.txt`` files in all."""
    return make_tree(tmp_path_factory.mktemp("produce"), PRODUCE_FILES)


@pytest.fixture(scope="session")
def search_tree(tmp_path_factory: pytest.TempPathFactory) -> pathlib.Path:
    """Produce folders plus a nested unicode folder: 14 files, 4 directories."""
    return make_tree(tmp_path_factory.mktemp("search"), {**PRODUCE_FILES, **UNICODE_FILES})


@pytest.fixture(scope="session")
def link_tree(tmp_path_factory: pytest.TempPathFactory) -> pathlib.Path:
    """A tree holding file and directory symlinks that point outside of it."""
    base = tmp_path_factory.mktemp("links")
    outside = make_tree(
        base / "outside",
        {
            "File_L0_original.txt": "Content of File_L0_original.txt",
            "SubDirOriginal/File_L1_original.txt": "Content of File_L1_original.txt",
            "SubDirOriginal/AnotherSubLevel/File_L2_original.txt": "Content of File_L2_original.txt",
        },
    )
    tree = make_tree(
        base / "tree",
        {
            "file_S0.txt": "Hello",
            "RealSubDir/file_S1.txt": "Hello world",
            "RealSubDir/Cave/file_S2.txt": "Cave file",
        },
    )
    try:
        os.symlink(outside / "File_L0_original.txt", tree / "File_L0.txt")
        os.symlink(outside / "SubDirOriginal", tree / "SubDirLink", target_is_directory=True)
        os.symlink(outside / "File_L0_original.txt", tree / "RealSubDir" / "Cave" / "File_L2.txt")
    except (OSError, NotImplementedError) as err:
        pytest.skip(f"symlinks unavailable: {err}")
    return tree
