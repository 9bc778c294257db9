from offline_manifest.globs import expand_braces, has_magic, match_any, match_glob


def test_star_stays_within_segment() -> None:
    assert match_glob("a.css", "*.css")
    assert not match_glob("css/a.css", "*.css")


def test_globstar_matches_zero_or_more_directories() -> None:
    assert match_glob("app.js.map", "**/*.map")
    assert match_glob("js/vendor/app.js.map", "**/*.map")
    assert not match_glob("app.js", "**/*.map")


def test_default_excludes_catch_dotfiles() -> None:
    assert match_glob(".htaccess", "**/.*")
    assert match_glob("static/.DS_Store", "**/.*")
    assert not match_glob("app.js", "**/.*")


def test_wildcards_skip_leading_dot() -> None:
    assert not match_glob(".hidden", "*")
    assert match_glob(".hidden", ".*")


def test_braces_classes_and_extglobs() -> None:
    assert match_glob("a.js", "*.{js,css}")
    assert match_glob("a.css", "*.{js,css}")
    assert not match_glob("a.png", "*.{js,css}")
    assert match_glob("img/a.png", "img/[ab].png")
    assert not match_glob("img/c.png", "img/[ab].png")
    assert match_glob("img/c.png", "img/[!ab].png")
    assert match_glob("foo.js", "@(foo|bar).js")
    assert not match_glob("baz.js", "@(foo|bar).js")
    assert match_glob("baz", "!(foo|bar)")
    assert not match_glob("foo", "!(foo|bar)")


def test_expand_braces() -> None:
    assert expand_braces("v{1..3}") == ["v1", "v2", "v3"]
    assert expand_braces("a{b,c{d,e}}") == ["ab", "acd", "ace"]
    assert expand_braces("{a}") == ["{a}"]


def test_has_magic() -> None:
    assert not has_magic("app.js")
    assert has_magic("*.js")
    assert has_magic("{a,b}.js")
    assert has_magic("img/[ab].png")
    assert not has_magic("{a}.js")
    assert not has_magic(r"file\*.js")


def test_match_any_is_or() -> None:
    assert match_any("app.js.map", ["**/.*", "**/*.map"])
    assert not match_any("app.js", ["**/.*", "**/*.map"])
