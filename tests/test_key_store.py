import pytest

from jwks_service.core.exceptions import StorageError
from conftest import execute_sql


@pytest.mark.asyncio
async def test_initialize_schema_is_idempotent(store, rsa_pem, now):
    await store.initialize_schema()
    await store.initialize_schema()

    kid = await store.insert(rsa_pem, now + 60)
    assert isinstance(kid, int)

@pytest.mark.asyncio
async def test_insert_assigns_increasing_kids(store, rsa_pem, now):
    first = await store.insert(rsa_pem, now + 60)
    second = await store.insert(rsa_pem, now - 60)
    assert second > first

@pytest.mark.asyncio
async def test_kid_not_reused_after_delete(context, store, rsa_pem, now):
    old_kid = await store.insert(rsa_pem, now + 60)
    await execute_sql(context, "DELETE FROM keys")

    new_kid = await store.insert(rsa_pem, now + 60)
    assert new_kid > old_kid

@pytest.mark.asyncio
async def test_stored_material_round_trips(store, rsa_pem, now):
    kid = await store.insert(rsa_pem, now + 60)
    record = await store.query_one_by_expiry(False, now)

    assert record.kid == kid
    assert record.private_key_pem == rsa_pem
    assert record.expires_at == now + 60

@pytest.mark.asyncio
@pytest.mark.parametrize("offset, expired", [
    (-100, False),
    (-1, False),
    (0, True),
    (1, True),
    (100, True),
])
async def test_expiry_class_boundary(store, rsa_pem, offset, expired):
    expires_at = 1_700_000_000
    kid = await store.insert(rsa_pem, expires_at)
    query_now = expires_at + offset

    matching = [r.kid for r in await store.query_by_expiry(expired, query_now)]
    other = [r.kid for r in await store.query_by_expiry(not expired, query_now)]

    assert kid in matching
    assert kid not in other

@pytest.mark.asyncio
async def test_query_by_expiry_orders_by_kid(store, rsa_pem, now):
    kids = [await store.insert(rsa_pem, now + ttl) for ttl in (300, 60, 600)]

    records = await store.query_by_expiry(False, now)
    assert [r.kid for r in records] == kids

@pytest.mark.asyncio
async def test_query_by_expiry_empty_is_not_an_error(store, now):
    assert await store.query_by_expiry(False, now) == []
    assert await store.query_by_expiry(True, now) == []

@pytest.mark.asyncio
async def test_query_one_returns_lowest_kid(store, rsa_pem, now):
    await store.insert(rsa_pem, now + 60)
    first_expired = await store.insert(rsa_pem, now - 30)
    await store.insert(rsa_pem, now - 60)

    record = await store.query_one_by_expiry(True, now)
    assert record.kid == first_expired

@pytest.mark.asyncio
async def test_query_one_returns_none_when_class_empty(store, rsa_pem, now):
    await store.insert(rsa_pem, now + 60)
    assert await store.query_one_by_expiry(True, now) is None

@pytest.mark.asyncio
async def test_count_by_expiry(store, rsa_pem, now):
    await store.insert(rsa_pem, now + 60)
    await store.insert(rsa_pem, now + 120)
    await store.insert(rsa_pem, now)

    assert await store.count_by_expiry(False, now) == 2
    assert await store.count_by_expiry(True, now) == 1

@pytest.mark.asyncio
class TestStorageFailures:

    async def test_read_without_schema_raises_storage_error(self, context):
        with pytest.raises(StorageError):
            await context.store.query_by_expiry(False)

    async def test_read_after_table_dropped_raises_storage_error(self, context, store):
        await execute_sql(context, "DROP TABLE keys")

        with pytest.raises(StorageError):
            await store.query_one_by_expiry(True)
        with pytest.raises(StorageError):
            await store.count_by_expiry(False)

    async def test_insert_after_table_dropped_raises_storage_error(self, context, store, rsa_pem, now):
        await execute_sql(context, "DROP TABLE keys")

        with pytest.raises(StorageError):
            await store.insert(rsa_pem, now + 60)

    async def test_error_message_wraps_driver_error(self, context, store):
        await execute_sql(context, "DROP TABLE keys")

        with pytest.raises(StorageError) as excinfo:
            await store.query_by_expiry(False)
        assert excinfo.value.__cause__ is not None
