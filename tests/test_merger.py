"""
Tests for the behavioral merger.

These tests verify that logic and quotas:
    - follow questions by exact text match
    - are dropped when their option disappears
    - never keep self references or out-of-range targets
and that indices are taken from the fresh order, never remapped.
"""

from formsync.merger import (
    clean_targets,
    match_by_identity,
    match_by_text,
    merge_questions,
    sanitize_logic,
)
from formsync.model import (
    InputKind,
    LogicRule,
    Question,
    Quota,
    QuotaCondition,
    StructuralQuestion,
)


def color_question(**kwargs) -> Question:
    defaults = dict(
        text="Favorite color",
        options=["Red", "Blue", "Green"],
        logic=[LogicRule(option="Blue", show_questions=[1])],
    )
    defaults.update(kwargs)
    return Question(**defaults)


def structural(text, options, kind=InputKind.SINGLE, uid=None) -> StructuralQuestion:
    return StructuralQuestion(text=text, input_kind=kind, options=list(options), uid=uid)


class TestMatching:
    """Test the matcher strategies."""

    def test_text_match_first_wins(self):
        first = Question(text="Same", uid="a")
        second = Question(text="Same", uid="b")
        assert match_by_text([first, second], structural("Same", ["x"])) is first

    def test_text_match_none(self):
        assert match_by_text([Question(text="A")], structural("B", ["x"])) is None

    def test_identity_match_ignores_text(self):
        prev = Question(text="Old title", uid="abc")
        assert match_by_identity([prev], structural("New title", ["x"], uid="abc")) is prev

    def test_identity_falls_back_to_text(self):
        prev = Question(text="Title", uid="abc")
        assert match_by_identity([prev], structural("Title", ["x"])) is prev


class TestMergeCarriesBehaviour:
    """Test carrying logic and quotas forward."""

    def test_rule_kept_when_option_survives(self):
        previous = [color_question(), Question(text="Why blue?")]
        fresh = [structural("Favorite color", ["Red", "Blue"]), structural("Why blue?", ["Sky"])]

        merged = merge_questions(previous, fresh)

        assert merged[0].logic == [LogicRule(option="Blue", show_questions=[1])]
        assert merged[0].options == ["Red", "Blue"]

    def test_rule_dropped_when_option_removed(self):
        """Red is gone, so the Red rule goes with it."""
        previous = [
            color_question(logic=[LogicRule(option="Red", show_questions=[1])]),
            Question(text="Follow up"),
        ]
        fresh = [structural("Favorite color", ["Blue", "Green"]), structural("Follow up", ["x"])]

        merged = merge_questions(previous, fresh)

        assert merged[0].logic == []

    def test_quota_carried_even_if_options_change(self):
        quota = Quota(condition=QuotaCondition.GREATER_THAN, value=2)
        previous = [color_question(logic=[], quota=quota)]
        fresh = [structural("Favorite color", ["Only"], kind=InputKind.MULTI)]

        merged = merge_questions(previous, fresh)

        assert merged[0].quota == quota
        assert merged[0].quota is not quota
        assert merged[0].input_kind is InputKind.MULTI

    def test_quota_check_carried(self):
        check = Quota(condition=QuotaCondition.EQUALS, value=1)
        previous = [
            color_question(logic=[LogicRule(option="Blue", show_questions=[1], quota_check=check)]),
            Question(text="Next"),
        ]
        merged = merge_questions(previous, [structural("Favorite color", ["Blue"]), structural("Next", ["x"])])
        assert merged[0].logic[0].quota_check == check

    def test_unmatched_question_is_bare(self):
        previous = [color_question(quota=Quota(value=1))]
        merged = merge_questions(previous, [structural("Favourite colour", ["Blue"])])
        assert merged[0].logic == []
        assert merged[0].quota is None

    def test_text_edit_breaks_match(self):
        """Default policy: a changed title loses its logic."""
        prev = color_question(uid="keep")
        merged = merge_questions([prev, Question(text="x")],
                                 [structural("Edited", ["Blue"], uid="keep"), structural("x", ["y"])])
        assert merged[0].logic == []

    def test_identity_matcher_survives_text_edit(self):
        prev = color_question(uid="keep")
        merged = merge_questions([prev, Question(text="x")],
                                 [structural("Edited", ["Blue"], uid="keep"), structural("x", ["y"])],
                                 matcher=match_by_identity)
        assert merged[0].logic == [LogicRule(option="Blue", show_questions=[1])]
        assert merged[0].uid == "keep"

    def test_matched_question_keeps_uid(self):
        prev = color_question(uid="stable")
        merged = merge_questions([prev], [structural("Favorite color", ["Blue"])])
        assert merged[0].uid == "stable"

    def test_unmatched_gets_new_uid(self):
        merged = merge_questions([], [structural("A", ["x"]), structural("B", ["y"])])
        assert merged[0].uid and merged[1].uid
        assert merged[0].uid != merged[1].uid

    def test_empty_previous(self):
        merged = merge_questions(None, [structural("A", ["x"])])
        assert merged == [Question(text="A", options=["x"])]

    def test_inputs_not_modified(self):
        previous = [color_question(), Question(text="Why blue?")]
        fresh = [structural("Favorite color", ["Red"]), structural("Why blue?", ["x"])]
        merge_questions(previous, fresh)
        assert previous[0].logic == [LogicRule(option="Blue", show_questions=[1])]
        assert fresh[0].options == ["Red"]


class TestMergeFiltersTargets:
    """Invalid targets are dropped silently."""

    def test_self_reference_removed(self):
        previous = [color_question(logic=[LogicRule(option="Blue", show_questions=[0, 1])]),
                    Question(text="Next")]
        merged = merge_questions(previous, [structural("Favorite color", ["Blue"]), structural("Next", ["x"])])
        assert merged[0].logic[0].show_questions == [1]

    def test_out_of_range_removed(self):
        previous = [color_question(logic=[LogicRule(option="Blue", show_questions=[1, 5])]),
                    Question(text="Next")]
        merged = merge_questions(previous, [structural("Favorite color", ["Blue"]), structural("Next", ["x"])])
        assert merged[0].logic[0].show_questions == [1]

    def test_reorder_is_not_remapped(self):
        """After a swap the old target 1 is the question itself and is dropped."""
        previous = [color_question(), Question(text="Why blue?")]
        fresh = [structural("Why blue?", ["x"]), structural("Favorite color", ["Blue"])]

        merged = merge_questions(previous, fresh)

        assert merged[1].text == "Favorite color"
        assert merged[1].logic == [LogicRule(option="Blue", show_questions=[])]


class TestCleanTargets:
    """Test target coercion."""

    def test_mixed_values(self):
        raw = ["1", 1.0, float("nan"), float("inf"), -1, 2.5, True, None, "x", 2]
        assert clean_targets(raw, owner_index=0, question_count=3) == [1, 2]

    def test_order_preserved(self):
        assert clean_targets([3, 1, 2], owner_index=0, question_count=4) == [3, 1, 2]

    def test_empty(self):
        assert clean_targets(None, 0, 3) == []


class TestSanitizeLogic:
    """Test sanitising questions that carry their own logic."""

    def test_drops_dangling_and_duplicate_rules(self):
        questions = [
            Question(
                text="Q",
                options=["A", "B"],
                logic=[
                    LogicRule(option="A", show_questions=[1]),
                    LogicRule(option="Gone", show_questions=[1]),
                    LogicRule(option="A", show_questions=[0]),
                ],
            ),
            Question(text="R"),
        ]
        result = sanitize_logic(questions)
        assert result[0].logic == [LogicRule(option="A", show_questions=[1])]
        assert len(questions[0].logic) == 3

    def test_keeps_uid(self):
        q = Question(text="Q", uid="u")
        assert sanitize_logic([q])[0].uid == "u"


class TestHugeTargets:
    """Targets beyond float range are dropped as out of range."""

    def test_clean_targets_huge_int(self):
        assert clean_targets([10 ** 400, 1], 0, 3) == [1]

    def test_sanitize_huge_target(self):
        questions = [
            Question(text="Q", options=["a"], logic=[LogicRule(option="a", show_questions=[10 ** 400, 1])]),
            Question(text="R"),
        ]
        assert sanitize_logic(questions)[0].logic == [LogicRule(option="a", show_questions=[1])]
