"""Tests for breadcrumb resolution over containment back-references."""

from cms_dashboard.services.breadcrumb_service import BreadcrumbService


async def test_resolves_trail_root_first_with_levels(orchard, content_store):
    ids = orchard.chain(3)
    service = BreadcrumbService(content_store)

    trail = await service.resolve_breadcrumb(ids[-1])

    assert [item.content_item_id for item in trail] == ids
    assert [item.level for item in trail] == [0, 1, 2]
    assert [item.display_text for item in trail] == ["Folder 0", "Folder 1", "Folder 2"]


async def test_root_folder_yields_single_item(orchard, content_store):
    orchard.add_folder("root", "Root")

    trail = await BreadcrumbService(content_store).resolve_breadcrumb("root")

    assert len(trail) == 1
    assert trail[0].content_item_id == "root"
    assert trail[0].level == 0


async def test_unknown_folder_yields_empty_trail(content_store):
    assert await BreadcrumbService(content_store).resolve_breadcrumb("nope") == []


async def test_trail_is_truncated_at_max_depth(orchard, content_store):
    ids = orchard.chain(15)
    service = BreadcrumbService(content_store)

    trail = await service.resolve_breadcrumb(ids[-1])

    # 10 parent hops from the leaf: the leaf plus its 10 nearest ancestors
    assert len(trail) == 11
    assert trail[-1].content_item_id == ids[-1]
    assert trail[0].content_item_id == ids[4]
    assert [item.level for item in trail] == list(range(11))


async def test_max_depth_can_be_overridden_per_call(orchard, content_store):
    ids = orchard.chain(5)

    trail = await BreadcrumbService(content_store).resolve_breadcrumb(ids[-1], max_depth=1)

    assert [item.content_item_id for item in trail] == ids[-2:]


async def test_trail_length_never_exceeds_max_depth_plus_one(orchard, content_store):
    ids = orchard.chain(8)
    service = BreadcrumbService(content_store, max_depth=3)

    for content_item_id in ids:
        trail = await service.resolve_breadcrumb(content_item_id)
        assert len(trail) <= 4


async def test_dangling_parent_link_collapses_to_empty(orchard, content_store):
    orchard.add_folder("child", "Child", parent_id="deleted-parent")

    assert await BreadcrumbService(content_store).resolve_breadcrumb("child") == []


async def test_store_failure_mid_chain_collapses_to_empty(orchard, content_store):
    ids = orchard.chain(4)
    orchard.failing_ids.add(ids[1])

    assert await BreadcrumbService(content_store).resolve_breadcrumb(ids[-1]) == []


async def test_transport_failure_collapses_to_empty(orchard, content_store):
    orchard.chain(2)
    orchard.fail_transport = True

    assert await BreadcrumbService(content_store).resolve_breadcrumb("f1") == []


async def test_containment_cycle_terminates(orchard, content_store):
    orchard.add_folder("a", "A", parent_id="b")
    orchard.add_folder("b", "B", parent_id="a")

    trail = await BreadcrumbService(content_store).resolve_breadcrumb("a")

    assert [item.content_item_id for item in trail] == ["b", "a"]
    assert [item.level for item in trail] == [0, 1]
    assert len(orchard.calls("GET")) == 2


async def test_self_parented_folder_terminates(orchard, content_store):
    orchard.add_folder("loop", "Loop", parent_id="loop")

    trail = await BreadcrumbService(content_store).resolve_breadcrumb("loop")

    assert [item.content_item_id for item in trail] == ["loop"]


async def test_untitled_ancestor_keeps_the_trail(orchard, content_store):
    orchard.add_folder("root", None)
    orchard.add_folder("child", "Child", parent_id="root")

    trail = await BreadcrumbService(content_store).resolve_breadcrumb("child")

    assert [(item.content_item_id, item.display_text) for item in trail] == [("root", ""), ("child", "Child")]
