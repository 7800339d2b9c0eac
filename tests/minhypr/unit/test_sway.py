"""Unit tests for the Sway adapter (i3ipc connection is mocked)."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest

from minhypr.compositor.sway import SCRATCHPAD_WORKSPACE, SwayCompositor, quote_workspace
from minhypr.core.errors import AdapterFailure


def make_con(con_id, workspace, app_id="foot", con_type="con", floating="auto_off"):
    return SimpleNamespace(
        id=con_id,
        type=con_type,
        nodes=[],
        window=None,
        app_id=app_id,
        window_class=None,
        name=f"{app_id} {con_id}",
        rect=SimpleNamespace(x=0, y=0, width=800, height=600),
        floating=floating,
        pid=4000 + con_id,
        workspace=lambda: SimpleNamespace(name=workspace),
    )


def make_connection(cons, focused=None, workspaces=("1",)):
    tree = Mock()
    tree.descendants.return_value = cons
    tree.find_focused.return_value = focused

    conn = Mock()
    conn.get_tree = AsyncMock(return_value=tree)
    conn.get_workspaces = AsyncMock(return_value=[
        SimpleNamespace(name=name, focused=(i == 0)) for i, name in enumerate(workspaces)
    ])
    conn.command = AsyncMock(return_value=[SimpleNamespace(success=True, error=None)])
    return conn


class TestSwayCompositor:
    """Test tree parsing and IPC commands."""

    @pytest.mark.asyncio
    async def test_list_windows(self):
        cons = [make_con(10, "1"), make_con(11, SCRATCHPAD_WORKSPACE, con_type="floating_con")]
        compositor = SwayCompositor(connection=make_connection(cons))

        windows = await compositor.list_windows()

        assert [w.handle for w in windows] == ["10", "11"]
        assert windows[0].app_class == "foot"
        assert windows[1].floating is True
        assert [compositor.is_hidden(w) for w in windows] == [False, True]

    @pytest.mark.asyncio
    async def test_containers_without_windows_are_skipped(self):
        split = make_con(5, "1")
        split.nodes = [make_con(6, "1")]
        compositor = SwayCompositor(connection=make_connection([split]))

        assert await compositor.list_windows() == []

    @pytest.mark.asyncio
    async def test_active_window(self):
        con = make_con(10, "1")
        compositor = SwayCompositor(connection=make_connection([con], focused=con))

        window = await compositor.active_window()

        assert window.handle == "10"

    @pytest.mark.asyncio
    async def test_active_workspace_and_exists(self):
        compositor = SwayCompositor(connection=make_connection([], workspaces=("2", "web")))

        assert await compositor.active_workspace() == "2"
        assert await compositor.workspace_exists("web")
        assert not await compositor.workspace_exists("9")

    @pytest.mark.asyncio
    async def test_hide_moves_to_scratchpad(self):
        conn = make_connection([make_con(10, "1")])

        await SwayCompositor(connection=conn).hide_window("10")

        conn.command.assert_awaited_once_with("[con_id=10] move scratchpad")

    @pytest.mark.asyncio
    async def test_restore_from_scratchpad(self):
        conn = make_connection([make_con(11, SCRATCHPAD_WORKSPACE, con_type="floating_con")])

        await SwayCompositor(connection=conn).move_window("11", "2", floating=False)

        conn.command.assert_awaited_once_with(
            '[con_id=11] scratchpad show, move container to workspace "2", floating disable'
        )

    @pytest.mark.asyncio
    async def test_move_missing_window_raises(self):
        compositor = SwayCompositor(connection=make_connection([]))

        with pytest.raises(AdapterFailure, match="no longer exists"):
            await compositor.move_window("99", "2")

    @pytest.mark.asyncio
    async def test_failed_command_raises(self):
        conn = make_connection([])
        conn.command = AsyncMock(return_value=[SimpleNamespace(success=False, error="No matching node")])

        with pytest.raises(AdapterFailure, match="No matching node"):
            await SwayCompositor(connection=conn).focus_window("99")

    @pytest.mark.asyncio
    async def test_close_quits_connection(self):
        conn = make_connection([])
        compositor = SwayCompositor(connection=conn)

        await compositor.close()
        await compositor.close()

        conn.main_quit.assert_called_once_with()

    def test_quote_workspace(self):
        assert quote_workspace('my "ws"') == '"my \\"ws\\""'
