"""Tests for the local filesystem object store."""

import os

import pytest

from fieldarea.storage import (
    LocalObjectStore,
    ObjectNotFoundError,
    ObjectStoreError,
    ObjectStoreErrorCode,
)


@pytest.fixture
def store(tmp_path):
    return LocalObjectStore(tmp_path / "objects")


class TestReadWrite:
    @pytest.mark.asyncio
    async def test_put_creates_directories(self, store):
        await store.put_object("users/u1/sessions/s1.json", '{"id": "s1"}')

        path = store.root / "users" / "u1" / "sessions" / "s1.json"
        assert path.read_text(encoding="utf-8") == '{"id": "s1"}'
        assert await store.get_object("users/u1/sessions/s1.json") == '{"id": "s1"}'

    @pytest.mark.asyncio
    async def test_overwrite_leaves_no_temp_files(self, store):
        await store.put_object("users/u1/index.json", "old")
        await store.put_object("users/u1/index.json", "new")

        assert await store.get_object("users/u1/index.json") == "new"
        assert os.listdir(store.root / "users" / "u1") == ["index.json"]

    @pytest.mark.asyncio
    async def test_unicode_body(self, store):
        await store.put_object("k.json", '{"name": "Feld Süd ✓"}')
        assert await store.get_object("k.json") == '{"name": "Feld Süd ✓"}'

    @pytest.mark.asyncio
    async def test_get_missing(self, store):
        with pytest.raises(ObjectNotFoundError):
            await store.get_object("users/u1/index.json")

    @pytest.mark.asyncio
    async def test_directory_is_not_an_object(self, store):
        await store.put_object("users/u1/index.json", "{}")
        with pytest.raises(ObjectNotFoundError):
            await store.get_object("users/u1")
        with pytest.raises(ObjectNotFoundError):
            await store.delete_object("users/u1")


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete(self, store):
        await store.put_object("a.json", "1")
        await store.delete_object("a.json")
        with pytest.raises(ObjectNotFoundError):
            await store.get_object("a.json")

    @pytest.mark.asyncio
    async def test_delete_missing(self, store):
        with pytest.raises(ObjectStoreError) as exc_info:
            await store.delete_object("a.json")
        assert exc_info.value.code == ObjectStoreErrorCode.OBJECT_NOT_FOUND


class TestList:
    @pytest.mark.asyncio
    async def test_empty_root(self, store):
        assert await store.list_objects("users/") == []

    @pytest.mark.asyncio
    async def test_prefix_filter(self, store):
        await store.put_object("users/u1/index.json", "{}")
        await store.put_object("users/u1/sessions/b.json", "{}")
        await store.put_object("users/u1/sessions/a.json", "{}")
        await store.put_object("users/u2/sessions/c.json", "{}")

        assert await store.list_objects("users/u1/sessions/") == [
            "users/u1/sessions/a.json",
            "users/u1/sessions/b.json",
        ]
        assert len(await store.list_objects("")) == 4

    @pytest.mark.asyncio
    async def test_skips_temp_files(self, store):
        await store.put_object("users/u1/sessions/a.json", "{}")
        (store.root / "users" / "u1" / "sessions" / ".tmp-abc").write_text("partial")

        assert await store.list_objects("users/u1/") == ["users/u1/sessions/a.json"]


class TestKeyValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "key",
        ["", "/etc/passwd", "../outside.json", "users/../../x", "users//x", "a\\b", "users/.tmp-x"],
    )
    async def test_rejects_unsafe_keys(self, store, key):
        with pytest.raises(ValueError):
            await store.put_object(key, "x")
