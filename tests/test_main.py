import pytest

from mdnote.main import main


@pytest.fixture
def note(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "shopping.md"
    path.write_text("---\ndomain: action\n---\n# Shopping\n- [ ] milk\n", encoding="utf-8")
    return path


def test_pin_and_fm(note, capsys):
    main(["pin", str(note)])
    assert note.read_text(encoding="utf-8") == "---\ndomain: action\npinned: true\n---\n# Shopping\n- [ ] milk\n"

    main(["fm", str(note), "pinned"])
    assert capsys.readouterr().out.strip() == "true"

    main(["unpin", str(note)])
    assert note.read_text(encoding="utf-8") == "---\ndomain: action\n---\n# Shopping\n- [ ] milk\n"


def test_set_and_html(note, capsys):
    main(["set", str(note), "count", "3"])
    assert "count: 3\n" in note.read_text(encoding="utf-8")

    main(["html", str(note)])
    out = capsys.readouterr().out
    assert "x-todo-box" in out
    assert "domain" not in out


def test_markdown_command(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    html = tmp_path / "page.html"
    html.write_text(
        '<ul class="x-todo"><li><span class="x-todo-box" contenteditable="false">'
        '<input type="checkbox" checked="true"></span> done</li></ul>',
        encoding="utf-8",
    )
    main(["markdown", str(html)])
    assert capsys.readouterr().out.strip() == "- [x] done"


def test_errors(note, tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["fm", str(tmp_path / "missing.md")])
    assert exc.value.code == 1

    with pytest.raises(SystemExit) as exc:
        main(["fm", str(note), "nope"])
    assert exc.value.code == 1

    with pytest.raises(SystemExit) as exc:
        main(["pin"])
    assert exc.value.code == 2

    with pytest.raises(SystemExit) as exc:
        main(["frobnicate", str(note)])
    assert exc.value.code == 2

    with pytest.raises(SystemExit) as exc:
        main(["--help"])
    assert exc.value.code == 0


def test_version_and_usage(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert capsys.readouterr().out.startswith("mdnote ")

    with pytest.raises(SystemExit) as exc:
        main(["set", "note.md", "key"])
    assert exc.value.code == 2

    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 0
    assert "pin" in capsys.readouterr().out
