import pytest

from textbook_trans.enums import SpanCategory
from textbook_trans.errors import SpanProtectionError, SpanRestorationError
from textbook_trans.span_protector import ProtectedSpan, detect_spans, find_tokens, protect, restore


RICH_SAMPLE = """# Kinematics

A robot arm solves $x = l_1 \\cos\\theta$ for every joint.

$$
\\tau = J^T F
$$

<pre>for joint in arm:
    joint.price = "$5"
</pre>

```python
cost = "$$ not math $$"
```

Call `solve_ik()` before moving.

<img src="arm.png" alt="arm">

![gripper](images/gripper.png)

<div class="mermaid-diagram">
  graph TD; A-->B
  <img src="legend.png">
</div>

<svg width="10"><circle r="4"/></svg>

Done.
"""


def test_round_trip_is_lossless():
    stripped, spans = protect(RICH_SAMPLE)

    assert restore(stripped, spans) == RICH_SAMPLE


def test_every_category_is_detected():
    _, spans = protect(RICH_SAMPLE)
    categories = [span.category for span in spans]

    assert categories.count(SpanCategory.Code) == 3
    assert categories.count(SpanCategory.Equation) == 2
    assert categories.count(SpanCategory.Image) == 3
    assert categories.count(SpanCategory.Diagram) == 2


def test_stripped_text_keeps_prose_only():
    stripped, _ = protect(RICH_SAMPLE)

    assert "A robot arm solves {{EQUATION_0}} for every joint." in stripped
    assert "Call {{CODE_2}} before moving." in stripped
    assert "$" not in stripped
    assert "<img" not in stripped
    assert "Done." in stripped


def test_reprotecting_output_finds_nothing():
    stripped, _ = protect(RICH_SAMPLE)

    assert detect_spans(stripped) == []


def test_spans_are_in_detection_order_not_document_order():
    content = "![a](a.png) then $x^2$ then <code>y = 1</code>"
    stripped, spans = protect(content)

    assert [span.token for span in spans] == ["{{CODE_0}}", "{{EQUATION_0}}", "{{IMAGE_0}}"]
    assert stripped == "{{IMAGE_0}} then {{EQUATION_0}} then {{CODE_0}}"


def test_dollar_inside_code_is_not_an_equation():
    content = "Price: <code>cost = $5 + $6</code> only."
    _, spans = protect(content)

    assert spans == [ProtectedSpan("{{CODE_0}}", "<code>cost = $5 + $6</code>")]


def test_inline_math_does_not_cross_a_blank_line():
    content = "It costs $5.\n\nAnother $ sign here."
    stripped, spans = protect(content)

    assert spans == []
    assert stripped == content


def test_ordinals_are_per_category():
    content = "<code>a</code> <code>b</code> $c$ $d$"
    stripped, _ = protect(content)

    assert stripped == "{{CODE_0}} {{CODE_1}} {{EQUATION_0}} {{EQUATION_1}}"


def test_token_collision_raises():
    content = "Literal {{CODE_0}} and real <code>x</code>"

    with pytest.raises(SpanProtectionError) as excinfo:
        protect(content)

    assert excinfo.value.token == "{{CODE_0}}"


def test_image_inside_diagram_restores():
    content = '<div class="diagram"><img src="a.png"> caption</div> text'
    stripped, spans = protect(content)

    assert stripped == "{{DIAGRAM_0}} text"
    assert spans[1].original_text == '<div class="diagram">{{IMAGE_0}} caption</div>'
    assert restore("translated {{DIAGRAM_0}}", spans) == 'translated <div class="diagram"><img src="a.png"> caption</div>'


def test_token_shaped_text_inside_code_survives():
    content = "<code>print('{{IMAGE_0}}')</code> and <img src='a.png'>"
    stripped, spans = protect(content)

    assert restore(stripped, spans) == content


def test_restore_replaces_every_occurrence():
    spans = [ProtectedSpan("{{EQUATION_0}}", "$E=mc^2$")]

    restored = restore("{{EQUATION_0}} ... again {{EQUATION_0}}", spans)

    assert restored == "$E=mc^2$ ... again $E=mc^2$"


def test_restore_in_any_order():
    content = "First <code>a()</code> then $b$."
    _, spans = protect(content)

    assert restore("{{EQUATION_0}} پہلے {{CODE_0}}", spans) == "$b$ پہلے <code>a()</code>"


def test_dropped_token_raises_with_field_name():
    _, spans = protect("Run <code>go()</code> now.")

    with pytest.raises(SpanRestorationError) as excinfo:
        restore("Run now.", spans, field_name="content")

    assert excinfo.value.token == "{{CODE_0}}"
    assert excinfo.value.field_name == "content"


def test_unknown_token_raises():
    _, spans = protect("Run <code>go()</code> now.")

    with pytest.raises(SpanRestorationError) as excinfo:
        restore("Run {{CODE_0}} {{CODE_1}} now.", spans, field_name="title")

    assert excinfo.value.token == "{{CODE_1}}"


def test_find_tokens():
    assert find_tokens("a {{CODE_0}} b {{DIAGRAM_12}} {{name}} {{OTHER_1}}") == ["{{CODE_0}}", "{{DIAGRAM_12}}"]


def test_token_shaped_prose_is_rejected_before_translation():
    with pytest.raises(SpanProtectionError) as excinfo:
        protect("Templates use {{IMAGE_3}} as a marker.")

    assert excinfo.value.token == "{{IMAGE_3}}"


@pytest.mark.parametrize("content", [
    "<code>print('{{CODE_1}}')</code> and <code>b</code>",
    "<code>a</code> and <code>print('{{CODE_0}}')</code>",
    "<code>x = '{{EQUATION_0}}'</code> with $y$",
])
def test_token_shaped_text_inside_a_span_stays_literal(content):
    stripped, spans = protect(content)

    assert restore(stripped, spans) == content


def test_literal_of_an_issued_token_inside_a_later_span_collides():
    content = '<img src="a.png"> <div class="diagram">{{IMAGE_0}}</div>'

    with pytest.raises(SpanProtectionError) as excinfo:
        protect(content)

    assert excinfo.value.token == "{{IMAGE_0}}"


def test_enclosed_token_is_not_accepted_at_top_level():
    _, spans = protect('<div class="diagram"><img src="a.png"></div>')

    with pytest.raises(SpanRestorationError) as excinfo:
        restore("{{DIAGRAM_0}} {{IMAGE_0}}", spans)

    assert excinfo.value.token == "{{IMAGE_0}}"


def test_error_message_without_field_name():
    _, spans = protect("Run <code>go()</code> now.")

    with pytest.raises(SpanRestorationError) as excinfo:
        restore("Run now.", spans)

    assert excinfo.value.field_name is None
    assert str(excinfo.value) == "Placeholder {{CODE_0}} was lost"


def test_error_message_names_the_field():
    _, spans = protect("Run <code>go()</code> now.")

    with pytest.raises(SpanRestorationError) as excinfo:
        restore("Run {{CODE_7}} now.", spans, field_name="title")

    assert str(excinfo.value) == "Unknown placeholder {{CODE_7}} in 'title'"
