"""
Tests for the interactive session: file drops, wiring, and node views.
"""

import asyncio

import pytest

from modelmap.config.loader import Config
from modelmap.config.singleton import set_config
from modelmap.core.ports import Direction, PortRef
from modelmap.core.types import Ranked, Unorderable, UnorderableReason, ValidationFailure
from modelmap.session import ModelSession
from modelmap.views import NodeView, rank_badge


def out(node_id, name):
    return PortRef(node_id, Direction.OUTPUT, name)


def inp(node_id, name):
    return PortRef(node_id, Direction.INPUT, name)


@pytest.fixture
def session():
    return ModelSession()


class TestLoadFile:
    """Dropping workbooks onto nodes."""

    @pytest.mark.asyncio
    async def test_load_into_placeholder(self, session, model_workbook):
        node_id = session.add_placeholder()
        assert session.views()[0].show_drop_hint

        path = model_workbook("Cost Model.xlsx", ["gross_revenue"], ["cogs"])
        result = await session.load_file(node_id, path)

        assert result.ok
        node = session.store.get_node(node_id)
        assert node.label == "Cost Model.xlsx"
        assert node.inputs == ("gross_revenue",)
        assert node.outputs == ("cogs",)
        assert not session.views()[0].show_drop_hint

    def test_load_file_runs_synchronously_outside_event_loop(self, session, model_workbook):
        node_id = session.add_placeholder()
        result = session.load_file(node_id, model_workbook(outputs=["x"]))
        assert result.outputs == ("x",)
        assert session.store.get_node(node_id).outputs == ("x",)

    @pytest.mark.asyncio
    async def test_rejected_extension_keeps_ports(self, session, model_workbook, tmp_path):
        node_id = session.add_placeholder()
        await session.load_file(node_id, model_workbook("m.xlsx", ["a"], ["b"]))

        csv = tmp_path / "data.csv"
        csv.write_text("variable_name\nx\n")
        assert await session.load_file(node_id, csv) is None

        node = session.store.get_node(node_id)
        assert node.load_error == "Only .xlsx / .xls files are accepted."
        assert node.inputs == ("a",)
        assert node.label == "m.xlsx"

    @pytest.mark.asyncio
    async def test_extensions_come_from_config(self, model_workbook):
        set_config(Config({"ingestion": {"accepted_extensions": [".xlsx"]}}))
        session = ModelSession()
        node_id = session.add_placeholder()

        await session.load_file(node_id, model_workbook("legacy.xls"))
        assert session.store.get_node(node_id).load_error == "Only .xlsx files are accepted."

    @pytest.mark.asyncio
    async def test_failed_ingestion_keeps_previous_ports(self, session, model_workbook, make_workbook):
        node_id = session.add_placeholder()
        await session.load_file(node_id, model_workbook("good.xlsx", ["a"], ["b"]))

        bad = make_workbook("bad.xlsx", {"INPUTS": [("variable_name",)]})
        result = await session.load_file(node_id, bad)

        node = session.store.get_node(node_id)
        assert result.error == "Required sheet(s) not found: OUTPUTS. Sheets in this file: INPUTS."
        assert node.load_error == result.error
        assert node.inputs == ("a",)
        assert node.outputs == ("b",)
        assert node.rank == Unorderable(UnorderableReason.DEGRADED_INPUT)

    @pytest.mark.asyncio
    async def test_successful_reload_clears_error(self, session, model_workbook, tmp_path):
        node_id = session.add_placeholder()
        await session.load_file(node_id, tmp_path / "missing.xlsx")
        assert session.store.get_node(node_id).load_error == "Failed to read the file from disk."

        await session.load_file(node_id, model_workbook(outputs=["x"]))
        assert session.store.get_node(node_id).load_error is None

    @pytest.mark.asyncio
    async def test_result_for_removed_node_is_dropped(self, session, model_workbook):
        node_id = session.add_placeholder()
        task = asyncio.ensure_future(session.load_file(node_id, model_workbook(outputs=["x"])))
        await asyncio.sleep(0)
        assert session.is_loading(node_id)
        assert session.views()[0].loading

        session.remove_node(node_id)
        result = await task

        assert result.outputs == ("x",)
        assert node_id not in session.store
        assert not session.is_loading(node_id)

    @pytest.mark.asyncio
    async def test_overlapping_loads_keep_node_loading(self, session, model_workbook, monkeypatch):
        from modelmap import session as session_module
        from modelmap.ingestion.excel import parse_workbook

        gates = {}

        async def gated_parse(path):
            gates[path.name] = asyncio.Event()
            await gates[path.name].wait()
            return parse_workbook(path)

        monkeypatch.setattr(session_module, "parse_workbook_async", gated_parse)

        node_id = session.add_placeholder()
        first = asyncio.ensure_future(session.load_file(node_id, model_workbook("first.xlsx", outputs=["a"])))
        second = asyncio.ensure_future(session.load_file(node_id, model_workbook("second.xlsx", outputs=["b"])))
        await asyncio.sleep(0)

        gates["first.xlsx"].set()
        await first
        assert session.is_loading(node_id)
        assert session.views()[0].loading

        gates["second.xlsx"].set()
        await second
        assert not session.is_loading(node_id)
        assert session.store.get_node(node_id).label == "second.xlsx"

    @pytest.mark.asyncio
    async def test_load_into_unknown_node(self, session, model_workbook):
        assert await session.load_file("node-404", model_workbook()) is None
        assert len(session.store) == 0

    @pytest.mark.asyncio
    async def test_add_model(self, session, model_workbook):
        node_id = await session.add_model(model_workbook("Headcount Model.xlsx", [], ["headcount"]))
        node = session.store.get_node(node_id)
        assert node.label == "Headcount Model.xlsx"
        assert node.rank == Ranked(0)


class TestWiring:
    """Connecting, suggestions and order description."""

    @pytest.fixture
    def models(self, session):
        store = session.store
        revenue = store.add_node("Revenue", ["tax_rate"], ["gross_revenue"])
        cost = store.add_node("Cost", ["gross_revenue", "headcount"], ["cogs"])
        headcount = store.add_node("Headcount", [], ["headcount"])
        return revenue, cost, headcount

    def test_connect_and_disconnect(self, session, models):
        revenue, cost, _ = models
        edge_id = session.connect(out(revenue, "gross_revenue"), inp(cost, "gross_revenue"))
        assert session.store.get_node(cost).rank == Ranked(1)

        session.disconnect(edge_id)
        assert session.store.get_node(cost).rank == Ranked(0)

    def test_connect_failure_is_returned(self, session, models):
        revenue, cost, _ = models
        assert session.connect(out(cost, "cogs"), inp(cost, "headcount")) is ValidationFailure.SELF_LOOP
        assert session.store.snapshot().edges == {}

    def test_accept_suggestions(self, session, models):
        revenue, cost, headcount = models
        added = session.accept_suggestions()

        assert len(added) == 2
        assert session.suggestions() == []
        assert session.store.get_node(cost).rank == Ranked(1)
        assert session.describe_order().splitlines() == ["Layer 0: Headcount ── Revenue", "Layer 1: Cost"]

    def test_dismiss_error(self, session):
        node_id = session.store.add_node("A", [], ["x"], load_error="boom")
        session.dismiss_error(node_id)
        view = session.views()[0]
        assert view.error is None
        assert view.badge == "0"


class TestNodeView:
    """Presentation records."""

    def test_rank_badges(self):
        assert rank_badge(None) == ""
        assert rank_badge(Ranked(3)) == "3"
        assert rank_badge(Unorderable(UnorderableReason.DEGRADED_INPUT)) == "!"
        assert rank_badge(Unorderable(UnorderableReason.CYCLIC)) == "∞"

    def test_drop_hint_hidden_by_error_or_loading(self):
        base = dict(id="n", label="", inputs=(), outputs=(), rank=None)
        assert NodeView(error=None, **base).show_drop_hint
        assert not NodeView(error="bad", **base).show_drop_hint
        assert not NodeView(error=None, loading=True, **base).show_drop_hint
