from hirelog.services.sanitize import sanitize_text


def test_script_block_removed_and_text_trimmed():
    assert sanitize_text("<script>alert(1)</script>Hello") == "Hello"


def test_script_tags_matched_case_insensitively_across_lines():
    value = "  <SCRIPT type='text/javascript'>\nsteal()\n</Script> Call on Monday  "
    assert sanitize_text(value) == "Call on Monday"


def test_every_script_block_is_removed():
    assert sanitize_text("a<script>x</script>b<script>y</script>c") == "abc"


def test_other_markup_is_kept():
    assert sanitize_text(" <b>Senior</b> engineer ") == "<b>Senior</b> engineer"


def test_empty_values():
    assert sanitize_text(None) == ""
    assert sanitize_text("   ") == ""
