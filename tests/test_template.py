"""Tests for the Template entity and its compile cache."""

import threading
import time

import pytest

from etpl import EngineConfig, Procedure, Template


class CountingTemplate(Template):
    """Template that counts how often compilation actually happens."""

    def __init__(self, *args, delay: float = 0.0, **kwargs):
        super().__init__(*args, **kwargs)
        self.compile_count = 0
        self.delay = delay

    def compile(self) -> Procedure:
        self.compile_count += 1
        if self.delay:
            time.sleep(self.delay)
        return super().compile()


def test_literal_only():
    assert Template("Hello, world!").render() == "Hello, world!"
    assert Template("Hello, world!").render({"x": 1}) == "Hello, world!"


def test_echo():
    assert Template("Hello, <%= name %>!").render({"name": "World"}) == "Hello, World!"


def test_absent_source_is_empty_template():
    assert Template().render() == ""
    assert Template(None).render({"a": 1}) == ""


def test_render_without_context_uses_empty_mapping():
    tpl = Template("[<%= a %>][<%= b.c[0] %>]")
    assert tpl.render() == "[][]"


def test_quotes_and_line_breaks_are_preserved():
    source = 'He said "hi",\r\nit\'s <%= who %>.\n\\n stays'
    assert Template(source).render({"who": "me"}) == (
        'He said "hi",\r\nit\'s me.\n\\n stays'
    )


def test_render_compiles_once():
    tpl = CountingTemplate("Hello, <%= name %>!")
    assert tpl.renderer is None

    assert tpl.render({"name": "A"}) == "Hello, A!"
    assert tpl.render({"name": "B"}) == "Hello, B!"
    assert tpl.render() == "Hello, !"

    assert tpl.compile_count == 1
    assert tpl.renderer is not None


def test_compile_does_not_cache():
    tpl = CountingTemplate("<%= x %>")
    first = tpl.compile()
    second = tpl.compile()

    assert first is not second
    assert tpl.compile_count == 2
    assert tpl.renderer is None


def test_cached_renderer_is_reused():
    tpl = Template("<%= x %>")
    tpl.render()
    renderer = tpl.renderer
    tpl.render({"x": 1})
    assert tpl.renderer is renderer


def test_concurrent_first_render_compiles_once():
    tpl = CountingTemplate("<% for i in items %><%= i %><% end %>", delay=0.05)
    barrier = threading.Barrier(8)
    results = []
    lock = threading.Lock()

    def worker(n):
        barrier.wait()
        out = tpl.render({"items": [n, n]})
        with lock:
            results.append((n, out))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert tpl.compile_count == 1
    assert sorted(results) == [(n, f"{n}{n}") for n in range(8)]


def test_config_is_used_for_compilation():
    config = EngineConfig(open_delimiter="[[", close_delimiter="]]")
    tpl = Template("<%= a %> [[= a ]]", config=config)
    assert tpl.render({"a": 1}) == "<%= a %> 1"


def test_from_file(tmp_path):
    path = tmp_path / "page.tpl"
    path.write_text("Hi <%= name %>\n", encoding="utf-8")

    tpl = Template.from_file(path)
    assert tpl.source == "Hi <%= name %>\n"
    assert tpl.render({"name": "you"}) == "Hi you\n"


def test_from_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        Template.from_file(tmp_path / "nope.tpl")


def test_repr_shows_state():
    tpl = Template("abc")
    assert "uncompiled" in repr(tpl)
    tpl.render()
    assert "compiled" in repr(tpl) and "uncompiled" not in repr(tpl)
