"""Tests for plugins, loaded scripts, bars and bar items."""
import pytest

from weeapi.core import Color
from weeapi.errors import HookError
from weeapi.plugin import Bar, BarItem, LoadedScript, Plugin


class TestPlugin:
    def test_all_and_find(self):
        names = [p.name for p in Plugin.all()]
        assert names == ["core", "python", "irc"]
        assert Plugin.find("irc").name == "irc"
        assert Plugin.find("perl") is None

    def test_infolist_properties(self):
        python = Plugin.find("python")
        assert python.license == "GPL3"
        assert python.licence == "GPL3"
        assert python.debug is False
        assert python.filename == "python.so"

    def test_scripts(self, host):
        host.add_infolist(
            "python_script",
            [{"pointer": "0x9000", "name": "hello", "version": "1.0"}],
        )
        python = Plugin.find("python")
        (script,) = python.scripts()
        assert isinstance(script, LoadedScript)
        assert script.plugin == python
        assert script.name == "hello"
        assert script.version == "1.0"
        assert LoadedScript.all() == [script]


class TestBar:
    def test_create_and_read(self, host):
        bar = Bar.create("info", position="bottom", items=["buffer_name", ["time", "lag"]])
        assert host.state.bars[bar.ptr]["items"] == "buffer_name,time+lag"
        assert bar.name == "info"
        assert bar.position == "bottom"
        assert bar.type == "root"
        assert bar.hidden is False
        assert bar.items == ["buffer_name", ["time", "lag"]]
        assert bar.color_fg == Color("default")
        assert Bar.find("info") == bar

    def test_duplicate(self):
        Bar.create("info")
        with pytest.raises(HookError):
            Bar.create("info")

    def test_set(self, host):
        bar = Bar.create("info")
        bar.hidden = True
        bar.color_bg = Color("blue")
        bar.items = ["a", "b"]
        assert bar.hidden is True
        assert host.state.bars[bar.ptr]["color_bg"] == "blue"
        assert bar.items == ["a", "b"]

    def test_update_and_remove(self, host):
        bar = Bar.create("info")
        bar.update()
        assert host.state.bars[bar.ptr]["updated"] == 1
        bar.remove()
        assert Bar.find("info") is None


class TestBarItem:
    def test_build_callback(self, host):
        item = BarItem.create("clock", lambda window: "12:00")
        assert item.name == "clock"
        assert host.build_bar_item("clock") == "12:00"

    def test_build_callback_gets_window(self, host):
        windows = []
        BarItem.create("where", lambda window: windows.append(window))
        assert host.build_bar_item("where", host.state.current_window) == ""
        assert windows[0].ptr == host.state.current_window

    def test_build_errors_are_logged(self, host, caplog):
        def broken(window):
            raise RuntimeError("boom")

        BarItem.create("broken", broken)
        assert host.build_bar_item("broken") == ""
        assert "build callback raised" in caplog.text

    def test_find_all_update_remove(self, host):
        item = BarItem.create("clock", lambda window: "")
        assert BarItem.find("clock") == item
        assert BarItem.all() == [item]
        item.update()
        assert host.state.bar_item_updates == ["clock"]
        item.remove()
        assert BarItem.find("clock") is None
