"""
TESTES - SINCRONIZAÇÃO (MOTOR DE RECONCILIAÇÃO)
===============================================

Executar com: pytest tests/test_sync_listings.py -v
"""

import pytest

from imoveis_sync.application.use_cases.sync_listings import (
    SyncListingsUseCase,
    compute_diff,
    dedupe_by_code,
)
from imoveis_sync.domain.exceptions import ParseError
from imoveis_sync.infrastructure.data_sources import FeedConfig, XmlFeedProvider
from tests.utils import FEED_DOWN, FakeSource, FakeStore, carga_xml, imovel_xml, make_listing


# =============================================================================
# DIFF
# =============================================================================

def test_diff_partition_is_exact():
    listings = [make_listing(code) for code in ("B", "C", "D")]

    plan = compute_diff(listings, {"A", "B", "C"})

    assert [listing.code for listing in plan.to_add] == ["D"]
    assert [listing.code for listing in plan.to_update] == ["B", "C"]
    assert plan.to_delete == ["A"]


def test_diff_empty_snapshot_deletes_all_active():
    plan = compute_diff([], {"A", "B"})

    assert plan.to_add == []
    assert plan.to_update == []
    assert plan.to_delete == ["A", "B"]


def test_diff_empty_baseline_adds_everything():
    plan = compute_diff([make_listing("A"), make_listing("B")], set())

    assert [listing.code for listing in plan.to_add] == ["A", "B"]
    assert plan.to_delete == []


def test_duplicate_codes_last_occurrence_wins():
    first = make_listing("A", titulo_imovel="Primeiro")
    last = make_listing("A", titulo_imovel="Último")

    deduped = dedupe_by_code([first, make_listing("B"), last])

    assert [listing.code for listing in deduped] == ["B", "A"]
    assert deduped[1].titulo_imovel == "Último"


# =============================================================================
# RODADA COMPLETA
# =============================================================================

@pytest.mark.asyncio
async def test_end_to_end_sync():
    """Banco {A,B,C} ativos, feed {B,C,D}: +1, ~2, -1."""
    store = FakeStore(active=["A", "B", "C"])
    source = FakeSource([make_listing(code) for code in ("B", "C", "D")])

    result = await SyncListingsUseCase(source, store).sync()

    assert result.success is True
    assert (result.added, result.updated, result.deleted) == (1, 2, 1)
    assert result.errors == []
    assert store.rows == {"A": False, "B": True, "C": True, "D": True}


@pytest.mark.asyncio
async def test_operations_run_deletes_then_updates_then_adds():
    store = FakeStore(active=["A", "B"])
    source = FakeSource([make_listing("B"), make_listing("C")])

    await SyncListingsUseCase(source, store).sync()

    assert store.operations == [("soft_delete", "A"), ("update", "B"), ("insert", "C")]


@pytest.mark.asyncio
async def test_second_run_is_idempotent():
    store = FakeStore(active=["A"])
    source = FakeSource([make_listing("A"), make_listing("B")])
    use_case = SyncListingsUseCase(source, store)

    await use_case.sync()
    second = await use_case.sync()

    assert second.success is True
    assert (second.added, second.updated, second.deleted) == (0, 2, 0)


@pytest.mark.asyncio
async def test_partial_failure_is_isolated():
    """10 inclusões, 1 falha forçada: 9 adicionados e 1 erro."""
    codes = [f"N{i}" for i in range(10)]
    store = FakeStore(fail_codes=["N4"])
    source = FakeSource([make_listing(code) for code in codes])

    result = await SyncListingsUseCase(source, store).sync()

    assert result.success is False
    assert result.added == 9
    assert len(result.errors) == 1
    assert result.errors[0].startswith("Failed to add property N4:")
    assert "N9" in store.rows


@pytest.mark.asyncio
async def test_update_and_delete_failures_are_reported():
    store = FakeStore(active=["A", "B"], fail_codes=["A", "B"])
    source = FakeSource([make_listing("B")])

    result = await SyncListingsUseCase(source, store).sync()

    assert result.success is False
    assert (result.added, result.updated, result.deleted) == (0, 0, 0)
    assert result.errors[0].startswith("Failed to delete property A:")
    assert result.errors[1].startswith("Failed to update property B:")


@pytest.mark.asyncio
async def test_fetch_failure_aborts_without_touching_store():
    store = FakeStore(active=["A", "B"])
    source = FakeSource(error=FEED_DOWN)

    result = await SyncListingsUseCase(source, store).sync()

    assert result.success is False
    assert (result.added, result.updated, result.deleted) == (0, 0, 0)
    assert len(result.errors) == 1
    assert result.errors[0].startswith("Synchronization failed:")
    assert store.operations == []
    assert store.rows == {"A": True, "B": True}


@pytest.mark.asyncio
async def test_parse_failure_aborts_run():
    store = FakeStore(active=["A"])
    source = FakeSource(error=ParseError("Malformed XML payload"))

    result = await SyncListingsUseCase(source, store).sync()

    assert result.success is False
    assert "Malformed XML payload" in result.errors[0]
    assert store.operations == []


@pytest.mark.asyncio
async def test_baseline_outage_turns_updates_into_failed_inserts():
    """Sem baseline, tudo vira inclusão; as que colidem são reportadas e nada é removido."""
    store = FakeStore(active=["A"], baseline_down=True)
    source = FakeSource([make_listing("A"), make_listing("B")])

    result = await SyncListingsUseCase(source, store).sync()

    assert result.success is False
    assert result.added == 1
    assert result.deleted == 0
    assert result.errors == [
        "Failed to add property A: insert failed: duplicate key"
    ]


@pytest.mark.asyncio
async def test_unpublished_listing_is_idempotent():
    """Publicar=0 não tira o imóvel do baseline: a 2ª rodada só atualiza."""
    store = FakeStore()
    source = FakeSource([make_listing("A", publicar="0"), make_listing("B")])
    use_case = SyncListingsUseCase(source, store)

    first = await use_case.sync()
    second = await use_case.sync()

    assert (first.added, first.errors) == (2, [])
    assert second.success is True
    assert (second.added, second.updated, second.deleted) == (0, 2, 0)
    assert second.errors == []
    assert store.rows == {"A": True, "B": True}


@pytest.mark.asyncio
async def test_feed_without_publicar_is_idempotent():
    listings = XmlFeedProvider(FeedConfig(url="https://feed.example.com")).parse(
        carga_xml(imovel_xml("A"), imovel_xml("B"))
    )
    assert all(listing.publicar == "0" for listing in listings)
    store = FakeStore()
    use_case = SyncListingsUseCase(FakeSource(listings), store)

    await use_case.sync()
    second = await use_case.sync()

    assert second.success is True
    assert (second.added, second.updated) == (0, 2)
    assert await store.count() == 2


# =============================================================================
# ESTATÍSTICAS
# =============================================================================

@pytest.mark.asyncio
async def test_stats_after_sync():
    store = FakeStore(active=["A", "B"])
    use_case = SyncListingsUseCase(FakeSource([make_listing("B")]), store)

    before = await use_case.get_stats()
    await use_case.sync()
    after = await use_case.get_stats()

    assert before["last_sync"] is None
    assert after == {
        "total_properties": 2,
        "active_properties": 1,
        "last_sync": use_case.last_sync,
    }
    assert after["last_sync"] is not None


@pytest.mark.asyncio
async def test_stats_store_failure_returns_zeros():
    from unittest.mock import AsyncMock

    from imoveis_sync.domain.exceptions import StoreError

    store = FakeStore()
    store.count = AsyncMock(side_effect=StoreError("count of properties failed"))

    stats = await SyncListingsUseCase(FakeSource(), store).get_stats()

    assert stats == {"total_properties": 0, "active_properties": 0, "last_sync": None}
