from __future__ import annotations

import pytest


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("a/b?c", "a.b.c"),
        ("a..b", "a.b"),
        ("a:b c", "a.b.c"),
        ("net.example.app", "net.example.app"),
        ('x<>\\*|"y', "x.y"),
        ("..leading", ".leading"),
    ],
)
def test_sanitize_identifier(raw: str, expected: str) -> None:
    from xcfg.options import sanitize_identifier

    assert sanitize_identifier(raw) == expected


def test_options_defaults() -> None:
    from xcfg.options import ConfigOptions

    opts = ConfigOptions()
    assert opts.confdir == ".config"
    assert opts.dir_mode == 0o700
    assert opts.file_mode == 0o600
    assert opts.filename == "config.json"
    assert opts.minify is False


def test_options_from_dict_falls_back_on_falsy_and_ignores_unknown() -> None:
    from xcfg.options import ConfigOptions

    opts = ConfigOptions.from_dict({"dir_mode": 0, "filename": "", "minify": 1, "bogus": True})
    assert opts.dir_mode == 0o700
    assert opts.filename == "config.json"
    assert opts.minify is True

    again = ConfigOptions.from_dict(opts.to_dict())
    assert again == opts


def test_options_from_dict_reads_string_modes_as_octal() -> None:
    from xcfg.options import ConfigOptions

    opts = ConfigOptions.from_dict({"dir_mode": "0750", "file_mode": "644"})
    assert opts.dir_mode == 0o750
    assert opts.file_mode == 0o644

    with pytest.raises(ValueError):
        ConfigOptions.from_dict({"file_mode": "rw-r--r--"})
