"""
Example form builder for demos and tests.

Builds the editor's starter form: a single-select colour question whose
"Blue" option reveals a follow-up, plus a multi-select question with a
quota.
"""
from formsync.model import InputKind, LogicRule, Question, Quota, QuotaCondition


def build_example_color_form(with_quota: bool = True) -> list:
    color = Question(
        text="What is your favorite color?",
        input_kind=InputKind.SINGLE,
        options=["Red", "Blue", "Green"],
        logic=[LogicRule(option="Blue", show_questions=[1])],
    )

    why_blue = Question(
        text="Why blue?",
        input_kind=InputKind.SINGLE,
        options=["The sky", "The sea", "Something else"],
    )

    # Multi-select with an answer-count quota
    shades = Question(
        text="Which shades do you like?",
        input_kind=InputKind.MULTI,
        options=["Light", "Dark", "Pastel", "Neon"],
    )
    if with_quota:
        shades.quota = Quota(condition=QuotaCondition.GREATER_THAN, value=1, meet_requirement=True)

    return [color, why_blue, shades]
