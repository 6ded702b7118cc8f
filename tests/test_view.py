"""
Unit tests for prefix views, typed accessors and the empty view.
"""

import pytest

from layercfg.errors import ReadOnlyError, ReadOnlyViewError
from layercfg.keys import KeyList
from layercfg.layer import Layer
from layercfg.stack import LayerStack
from layercfg.view import View, empty_view, parse_bool, parse_int


@pytest.fixture
def layer():
    layer = Layer("test")
    layer.set_string("my.test.key.first", "1st")
    layer.set_string("my.test.key.onlymy", "2nd")
    layer.set_string("my.test.stuff", "mystuff")
    layer.set_string("your.test.key.first", "3rd")
    layer.set_string("your.test.key.onlyyour", "4th")
    layer.set_string("your.test.stuff", "yourstuff")
    return layer


class TestPrefix:
    def test_empty_prefix_passes_keys_through(self, layer):
        view = View(View(layer, ""), "")
        assert view.prefix == ""
        assert view.get_string("my.test.stuff") == "mystuff"
        assert view.get_string("your.test.key.first") == "3rd"

    def test_prefixed_view(self, layer):
        view = View(layer, "my")
        assert view.prefix == "my."
        assert view.get_string("my.test.key.first") is None
        assert view.get_string("test.key.first") == "1st"
        assert view.get_string("test.key.onlymy") == "2nd"
        assert view.get_string("test.key.onlyyour") is None
        assert view.get_string("test.stuff") == "mystuff"

    def test_prefix_already_terminated(self, layer):
        assert View(layer, "my.").prefix == "my."

    def test_view_of_view_is_flattened(self, layer):
        inner = View(layer, "my")
        outer = View(inner, "test")
        assert outer.prefix == "my.test."
        assert outer.target is layer

        deeper = View(View(outer, "key"), "")
        assert deeper.prefix == "my.test.key."
        assert deeper.target is layer

    def test_composition_is_associative(self, layer):
        nested = View(View(layer, "my"), "test")
        flat = View(layer, "my.test")
        assert nested.get_string("stuff") == flat.get_string("stuff") == "mystuff"
        assert nested.get_string("key.first") == flat.get_string("key.first") == "1st"

    def test_view_over_stack(self):
        base = Layer("base")
        base.set_string("server.port", "80")
        override = Layer("override")
        override.set_string("server.port", "8080")
        stack = LayerStack()
        stack.add_layer(base, 0)
        stack.add_writable_layer(override, 10)

        server = View(stack, "server")
        assert server.get_string("port") == "8080"
        server.set_int("workers", 4)
        assert override.get_string("server.workers") == "4"


class TestWrites:
    def test_subview_write(self, layer):
        view = View(layer, "my")
        sub = view.sub_view("test")
        assert sub.is_writable()
        sub.set_string("stuff", "123")
        assert layer.get_string("my.test.stuff") == "123"

    def test_read_only_subview(self, layer):
        sub = View(layer, "my").sub_view_read_only("test")
        assert not sub.is_writable()
        with pytest.raises(ReadOnlyViewError):
            sub.set_string("stuff", "456")
        with pytest.raises(ReadOnlyViewError):
            sub.delete_value("stuff")
        assert sub.get_string("stuff") == "mystuff"
        assert sorted(sub.keys("", True)) == ["key", "stuff"]

    def test_read_only_view_over_writable_target(self, layer):
        """The local flag rejects writes even though the layer would accept them."""
        view = View(layer, "my", writable=False)
        assert layer.is_writable()
        with pytest.raises(ReadOnlyViewError):
            view.set_string("x", "1")

    def test_writable_view_over_locked_layer(self, layer):
        layer.lock_read_only()
        view = View(layer, "my")
        assert not view.is_writable()
        with pytest.raises(ReadOnlyError):
            view.set_string("x", "1")

    def test_delete_through_view(self, layer):
        sub = View(layer, "my").sub_view("test")
        sub.delete_value("key.first")
        assert sorted(sub.keys("", True)) == ["key", "stuff"]
        sub.delete_value("key.onlymy")
        assert sub.keys("", True) == ["stuff"]
        assert layer.get_string("your.test.key.first") == "3rd"

    def test_list_keys_with_prefix(self, layer):
        view = View(layer, "your")
        out = KeyList()
        view.list_keys("test.key", out, False)
        assert sorted(out) == ["first", "onlyyour"]


class TestTypedAccess:
    @pytest.fixture
    def view(self):
        layer = Layer("test")
        view = View(layer, "")
        view.set_int("year", 2024)
        view.set_int("numtrue", 1)
        view.set_int("negative", -42)
        view.set_bool("altrue", True)
        view.set_bool("alfalse", False)
        view.set_string("numstart", "123text")
        view.set_string("hex", "0xff")
        view.set_string("octal", "010")
        return view

    def test_stored_text(self, view):
        target = view.target
        assert target.get_string("year") == "2024"
        assert target.get_string("numtrue") == "1"
        assert target.get_string("negative") == "-42"
        assert target.get_string("altrue") == "true"
        assert target.get_string("alfalse") == "false"

    def test_get_int(self, view):
        assert view.get_int("year") == 2024
        assert view.get_int("numtrue") == 1
        assert view.get_int("negative") == -42
        assert view.get_int("hex") == 255
        assert view.get_int("octal") == 8
        assert view.get_int("altrue") is None
        assert view.get_int("numstart") is None
        assert view.get_int("missing") is None

    def test_get_bool(self, view):
        assert view.get_bool("altrue") is True
        assert view.get_bool("alfalse") is False
        assert view.get_bool("numtrue") is True
        assert view.get_bool("year") is None
        assert view.get_bool("numstart") is None
        assert view.get_bool("hex") is None
        assert view.get_bool("missing") is None

    @pytest.mark.parametrize("text,expected", [
        ("0", 0),
        ("+7", 7),
        ("-0x10", -16),
        ("0X1F", 31),
        ("0o17", 15),
        ("0b101", 5),
        ("9223372036854775807", 9223372036854775807),
        ("-9223372036854775808", -9223372036854775808),
        ("9223372036854775808", None),
        ("08", None),
        ("0x", None),
        ("", None),
        (" 1", None),
        ("1.5", None),
    ])
    def test_parse_int(self, text, expected):
        assert parse_int(text) == expected

    @pytest.mark.parametrize("text,expected", [
        ("true", True), ("True", True), ("TRUE", True), ("t", True), ("1", True),
        ("false", False), ("F", False), ("0", False),
        ("yes", None), ("tRuE", None), ("", None),
    ])
    def test_parse_bool(self, text, expected):
        assert parse_bool(text) is expected


class TestEmptyView:
    def test_empty_view_is_read_only(self):
        view = empty_view()
        assert not view.is_writable()
        assert view.get_string("") is None
        assert view.get_string("test") is None
        assert view.keys("", True) == []
        with pytest.raises(ReadOnlyViewError):
            view.set_string("key", "value")
        with pytest.raises(ReadOnlyViewError):
            view.delete_value("key")

    def test_empty_target_refuses_writes(self):
        """Even a writable view over the empty target cannot write."""
        view = View(empty_view(), "sub", writable=True)
        assert not view.is_writable()
        with pytest.raises(ReadOnlyError):
            view.set_string("key", "value")
        with pytest.raises(ReadOnlyError):
            view.delete_value("key")
        assert view.get_string("key") is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
