import itertools

import pytest

from meta_analyzer import (
    IMPORTANT_FIELDS,
    MetadataRecord,
    build_report,
    extract,
    missing_important_fields,
    recommendation_for,
)

URL = "https://ex.com/"


@pytest.mark.parametrize("present", list(itertools.product([True, False], repeat=3)))
def test_missing_fields_follow_declaration_order(present):
    values = {name: ("x" if keep else None) for name, keep in zip(IMPORTANT_FIELDS, present)}
    record = MetadataRecord(source_url=URL, **values)
    expected = [name for name, keep in zip(IMPORTANT_FIELDS, present) if not keep]
    assert missing_important_fields(record) == expected


def test_empty_string_counts_as_present():
    record = MetadataRecord(source_url=URL, title="", description="", og_image="")
    assert missing_important_fields(record) == []


def test_nothing_missing_for_complete_page():
    html = """<title>Example</title>
    <meta name="description" content="A site.">
    <meta property="og:image" content="https://ex.com/img.png">
    <link rel="canonical" href="https://ex.com/">"""
    report = build_report(extract(html, URL))
    assert report.missing_fields == ()
    assert report.recommendations == ()


def test_bare_page_gets_three_recommendations_in_order():
    report = build_report(extract("<html><body><p>Nothing here</p></body></html>", URL))
    assert report.missing_fields == ("title", "description", "og_image")
    assert [rec.heading for rec in report.recommendations] == [
        "Add a Title Tag",
        "Add a Meta Description",
        "Add an Open Graph Image",
    ]


def test_recommendation_content():
    title = recommendation_for("title")
    assert title.heading == "Add a Title Tag"
    assert title.tips == (
        "Keep it under 60 characters",
        "Include your primary keyword",
        "Make it accurately describe the page content",
        "Make it unique for each page",
    )

    description = recommendation_for("description")
    assert description.heading == "Add a Meta Description"
    assert description.tips == (
        "Keep it under 160 characters",
        "Include relevant keywords naturally",
        "Write a compelling summary of the page",
        "Encourage users to click through",
    )

    og_image = recommendation_for("og_image")
    assert og_image.heading == "Add an Open Graph Image"
    assert og_image.tips == (
        "Use an eye-catching, relevant image",
        "Recommended size: 1200×630 pixels",
        "Use JPG or PNG format",
        "Keep the file size under 1MB",
    )


def test_recommendation_for_unknown_field():
    with pytest.raises(KeyError):
        recommendation_for("keywords")
