# File: tests/test_extractors.py
from site_spider.parser.html_parser import (
    extract_asset_refs,
    extract_form_actions,
    extract_hyperlinks,
    extract_upload_markers,
    parse_html,
)
from site_spider.parser.patterns import (
    PatternSet,
    decode_chars,
    extract_bucket_names,
    extract_script_paths,
    extract_subdomains,
)

PAGE = """
<html><head>
  <link rel="stylesheet" href="/css/site.css">
  <script src="/static/app.min.js"></script>
  <script src="https://cdn.example.net/lib/data.json?v=2"></script>
</head><body>
  <a href="/about">About</a>
  <a href="mailto:me@example.com">Mail</a>
  <img src="/img/logo.png">
  <form action="/search"><input name="q"></form>
  <form action="/upload" method="post"><input type="FILE" name="doc"></form>
</body></html>
"""


def test_extract_hyperlinks_returns_raw_href_values():
    assert extract_hyperlinks(PAGE) == ["/css/site.css", "/about", "mailto:me@example.com"]


def test_extract_form_actions():
    assert extract_form_actions(PAGE) == ["/search", "/upload"]
    assert extract_form_actions("<form><input></form>") == []


def test_extract_upload_markers():
    assert extract_upload_markers(PAGE) is True
    assert extract_upload_markers('<input type="text">') is False


def test_extract_asset_refs_keeps_scripts_xml_json_only():
    assert extract_asset_refs(PAGE, "https://example.com/") == [
        "https://example.com/static/app.min.js",
        "https://cdn.example.net/lib/data.json?v=2",
    ]


def test_extractors_tolerate_broken_markup():
    broken = '<html><a href="/ok">x<form action="/f"<<script src="/a.js"'
    assert "/ok" in extract_hyperlinks(broken)
    assert extract_upload_markers("<<<>>>") is False
    assert extract_hyperlinks("") == []


def test_parse_html_collects_everything_in_one_pass():
    page = parse_html(PAGE, "https://example.com/")
    assert page.url == "https://example.com/"
    assert "/about" in page.links
    assert page.forms == ["/search", "/upload"]
    assert page.has_upload
    assert page.assets[0] == "https://example.com/static/app.min.js"


def test_extract_subdomains():
    body = (
        "see https://api.example.com/v1 and //cdn.example.com/x, "
        "%2fstatic.example.com and example.com itself, notexample.com too"
    )
    subs = extract_subdomains(decode_chars(body), "example.com")
    assert subs == ["api.example.com", "cdn.example.com", "static.example.com"]


def test_extract_subdomains_strips_encoding_leftovers():
    assert extract_subdomains("u=2fapi.example.com", "example.com") == ["api.example.com"]


def test_extract_bucket_names():
    body = "https://mybucket.s3.amazonaws.com/key and again https://mybucket.s3.amazonaws.com/other"
    assert extract_bucket_names(body) == ["mybucket.s3.amazonaws.com"]


def test_extract_bucket_names_other_shapes():
    body = "//s3.amazonaws.com/assets-prod and logs.s3-eu-west-1.amazonaws.com"
    assert extract_bucket_names(body) == [
        "//s3.amazonaws.com/assets-prod",
        "logs.s3-eu-west-1.amazonaws.com",
    ]


def test_extract_script_paths():
    js = """
    var api = "/api/v1/users";
    fetch('https://cdn.example.net/lib/x.js');
    const rel = "./partials/menu.html";
    load("user/profile.json");
    var n = 1 + 2;
    """
    paths = extract_script_paths(js)
    assert "/api/v1/users" in paths
    assert "https://cdn.example.net/lib/x.js" in paths
    assert "./partials/menu.html" in paths
    assert "user/profile.json" in paths
    assert extract_script_paths("var n = 1 + 2;") == []


def test_extract_script_paths_decodes_escapes():
    assert extract_script_paths('x="\\u002fapi\\u002fitems"') == ["/api/items"]


def test_pattern_set_is_swappable():
    patterns = PatternSet(script_paths=lambda body: ["/custom"])
    assert extract_script_paths("anything", patterns) == ["/custom"]


def test_failing_strategy_yields_empty_result():
    def broken(body):
        raise ValueError("bad pattern")

    assert extract_bucket_names("body", PatternSet(buckets=broken)) == []


def test_decode_chars():
    assert decode_chars("%2Fapi\\u002fv1\\u0026x") == "/api/v1&x"
