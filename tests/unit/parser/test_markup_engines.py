import logging
import os
from datetime import datetime

import pytest

from bakehouse.config import load_config
from bakehouse.parser.base import MarkupEngine
from bakehouse.parser.parser import Parser, file_extension
from bakehouse.parser.registry import MarkupEngines

HEADER_POST = """title=First post
date=2024-02-03
type=post
tags=python, static sites
status=published
meta={"author": "ana", "level": 2}
~~~~~~

Hello *world*.
"""


@pytest.fixture
def parser(config):
    return Parser(config, MarkupEngines())


def test_plain_header_is_parsed(parser, site, write_file):
    source = write_file(site, "content/first.md", HEADER_POST)

    record = parser.process_file(source)

    assert record.title == "First post"
    assert record.type == "post"
    assert record.status == "published"
    assert record.date == datetime(2024, 2, 3)
    assert record.tags == ["python", "static sites"]
    assert record["meta"] == {"author": "ana", "level": 2}
    assert "<em>world</em>" in record.body


def test_tags_are_sanitized_when_configured(site, write_file):
    config = load_config(site, tag_sanitize=True)
    source = write_file(site, "content/first.md", HEADER_POST)

    record = Parser(config, MarkupEngines()).process_file(source)

    assert record.tags == ["python", "static-sites"]


def test_byte_order_mark_is_ignored(parser, site, write_file):
    source = write_file(site, "content/bom.html", "\ufefftype=page\nstatus=draft\n~~~~~~\n<p>x</p>\n")

    record = parser.process_file(source)

    assert record.type == "page"
    assert record.status == "draft"
    assert record.body == "<p>x</p>"


def test_markdown_front_matter(parser, site, write_file):
    source = write_file(
        site,
        "content/front.md",
        "---\ntitle: Front\ntype: post\nstatus: published\ndate: 2024-05-06\ntags: [a, b]\n---\n# Heading\n",
    )

    record = parser.process_file(source)

    assert record.title == "Front"
    assert record.date == datetime(2024, 5, 6)
    assert record.tags == ["a", "b"]
    assert "<h1>Heading</h1>" in record.body


def test_front_matter_numbers_become_text(parser, site, write_file):
    source = write_file(site, "content/year.md", "---\ntitle: 1984\ntype: post\nstatus: published\n---\nBook\n")

    record = parser.process_file(source)

    assert record.title == "1984"
    assert record.type == "post"


def test_invalid_front_matter_value_skips_file(parser, site, write_file, caplog):
    source = write_file(
        site, "content/list.md", "---\ntitle: [a, b]\ntype: post\nstatus: published\n---\nBody\n"
    )

    with caplog.at_level(logging.ERROR):
        record = parser.process_file(source)

    assert record is None
    assert "Invalid header in" in caplog.text


def test_markdown_tables_are_enabled(parser, site, write_file):
    source = write_file(site, "content/table.md", "type=page\nstatus=published\n~~~~~~\n| a |\n|---|\n| 1 |\n")

    record = parser.process_file(source)

    assert "<table>" in record.body


def test_missing_type_or_status_skips_file(parser, site, write_file, caplog):
    source = write_file(site, "content/nohead.md", "title=Nothing\n~~~~~~\nbody\n")

    with caplog.at_level(logging.WARNING):
        record = parser.process_file(source)

    assert record is None
    assert "type or status is missing" in caplog.text


def test_header_needs_equals_on_every_line():
    lines = ["type=post", "not a header line", "status=published", "~~~~~~"]

    assert MarkupEngine.has_header(lines, "~~~~~~") is False
    assert MarkupEngine.has_header(["type=post", "", "status=draft", "~~~~~~"], "~~~~~~") is True
    assert MarkupEngine.has_header(["type=post", "status=draft"], "~~~~~~") is False
    assert MarkupEngine.has_header(["title=x", "status=draft", "~~~~~~"], "~~~~~~") is False


def test_defaults_apply_when_header_is_absent(site, write_file):
    config = load_config(site, default_status="published", default_type="page")
    source = write_file(site, "content/plain.html", "<p>Just HTML</p>\n")
    mtime = datetime(2023, 7, 8, 9, 10, 11).timestamp()
    os.utime(source, (mtime, mtime))

    record = Parser(config, MarkupEngines()).process_file(source)

    assert record.type == "page"
    assert record.status == "published"
    assert record.body == "<p>Just HTML</p>\n"
    assert record.date == datetime(2023, 7, 8, 9, 10, 11)


def test_custom_separator_and_date_format(site, write_file):
    config = load_config(site, header_separator="+++", date_format="%d/%m/%Y")
    source = write_file(site, "content/custom.html", "type=post\nstatus=published\ndate=31/12/2023\n+++\nbody")

    record = Parser(config, MarkupEngines()).process_file(source)

    assert record.date == datetime(2023, 12, 31)
    assert record.body == "body"


def test_invalid_json_header_value_is_kept_as_text(parser, site, write_file):
    source = write_file(site, "content/json.html", "type=page\nstatus=published\nmeta={broken}\n~~~~~~\n")

    record = parser.process_file(source)

    assert record["meta"] == "{broken}"


def test_yaml_document_strips_key_prefix(parser, site, write_file):
    source = write_file(
        site,
        "content/item.yaml",
        "bakehouse-type: page\nbakehouse-status: published\ntitle: From YAML\nitems: [1, 2]\n",
    )

    record = parser.process_file(source)

    assert record.type == "page"
    assert record.title == "From YAML"
    assert record["items"] == [1, 2]
    assert record.body == ""


def test_forced_document_type_for_data_files(parser, site, write_file):
    source = write_file(site, "data/authors.yml", "- name: Ana\n- name: Bo\n")

    record = parser.process_file(source, document_type="data")

    assert record.type == "data"
    assert record.status == "published"
    assert record["data"] == [{"name": "Ana"}, {"name": "Bo"}]


def test_unknown_extension_has_no_engine(parser, site, write_file):
    source = write_file(site, "content/notes.docx", "binary")

    assert parser.process_file(source) is None


@pytest.mark.parametrize(
    ("name", "expected"),
    [("post.md", "md"), ("archive.tar.gz", "gz"), (".hidden", ""), ("README", ""), ("dir/x.HTML", "HTML")],
)
def test_file_extension(name, expected):
    assert file_extension(name) == expected
