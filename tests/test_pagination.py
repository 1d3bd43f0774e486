"""Нормализация номера страницы и нарезка списка"""
import pytest

from files.pagination import get_page, normalize_page
from models.file import FileModel


@pytest.mark.parametrize("raw, expected", [
    (0, 0),
    (2, 2),
    ("3", 3),
    (-1, 0),
    ("-4", 0),
    ("abc", 0),
    ("", 0),
    (None, 0),
])
def test_normalize_page(raw, expected):
    assert normalize_page(raw) == expected


@pytest.fixture
async def folder_with_children(db):
    folder = FileModel(user_id=1, name="docs", type="folder", parent_id=0)
    db.add(folder)
    await db.commit()
    await db.refresh(folder)

    db.add_all([
        FileModel(user_id=1, name=f"file_{i}.txt", type="file", parent_id=folder.id, local_path=f"/tmp/{i}")
        for i in range(45)
    ])
    await db.commit()
    return folder


async def test_pages_of_45_children(db, folder_with_children):
    first = await get_page(db, folder_with_children.id, 0)
    second = await get_page(db, folder_with_children.id, 1)
    third = await get_page(db, folder_with_children.id, 2)
    beyond = await get_page(db, folder_with_children.id, 3)

    assert len(first) == 20
    assert len(second) == 20
    assert len(third) == 5
    assert beyond == []


async def test_pages_follow_insertion_order(db, folder_with_children):
    first = await get_page(db, folder_with_children.id, 0)
    third = await get_page(db, folder_with_children.id, 2)

    assert [r.name for r in first[:2]] == ["file_0.txt", "file_1.txt"]
    assert third[-1].name == "file_44.txt"


async def test_non_numeric_page_is_first_page(db, folder_with_children):
    first = await get_page(db, folder_with_children.id, 0)
    garbage = await get_page(db, folder_with_children.id, "garbage")

    assert [r.id for r in garbage] == [r.id for r in first]


async def test_only_direct_children_are_listed(db, folder_with_children):
    root = await get_page(db, 0, 0)

    assert [r.id for r in root] == [folder_with_children.id]


@pytest.mark.parametrize("page", [10 ** 18, "461168601842738791"])
async def test_page_past_offset_range_is_empty(db, folder_with_children, page):
    assert await get_page(db, folder_with_children.id, page) == []
