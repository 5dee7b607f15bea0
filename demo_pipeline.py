#!/usr/bin/env python3
"""
Round-Trip Demo: Markup → Questions → Code Sample → Questions

Shows the full workflow:
1. Parse the starter markup
2. Attach logic and a quota in the editor
3. Render a Python code sample and edit its payload block
4. Resolve visibility and quotas for a set of responses
5. Analyze the form
"""

from formsync.analyzer import analyze_form
from formsync.backends import Target
from formsync.editor import add_option, add_question, save_logic_for_option, save_quota, set_input_kind
from formsync.model import InputKind, Quota, QuotaCondition
from formsync.quota import evaluate_quotas
from formsync.responses import build_response_document
from formsync.sync import apply_view_text, commit, initial_state, switch_view
from formsync.visibility import resolve_visible


def main():
    print("=" * 80)
    print("ROUND-TRIP DEMO: Markup → Questions → Code Sample → Questions")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Parse markup
    # =========================================================================
    print("\n1. PARSING MARKUP...")
    state = initial_state()
    for q in state.questions:
        print(f"   ✓ {q.text!r} {q.input_kind.value} {q.options}")

    # =========================================================================
    # STEP 2: Editor operations
    # =========================================================================
    print("\n2. EDITING...")
    questions = add_question(state.questions, "Why blue?")
    questions = save_logic_for_option(questions, 0, "Blue", "2")
    questions = add_question(questions, "Which shades do you like?")
    questions = set_input_kind(questions, 2, InputKind.MULTI)
    questions = add_option(questions, 2)
    questions = save_quota(questions, 2, Quota(QuotaCondition.GREATER_THAN, 1, True))
    state = commit(state, questions)
    print(f"   ✓ Questions: {len(state.questions)}")
    print(f"   ✓ Rule: Blue -> Q{state.questions[0].logic[0].show_questions[0] + 1}")

    # =========================================================================
    # STEP 3: Code sample round trip
    # =========================================================================
    print("\n3. CODE SAMPLE...")
    state = switch_view(state, Target.PYTHON)
    edited = state.view_text.replace('"Why blue?"', '"Why did you pick blue?"')
    state = apply_view_text(state, edited)
    print(f"   ✓ Error: {state.error}")
    print(f"   ✓ Second question now: {state.questions[1].text!r}")

    broken = apply_view_text(state, state.view_text.replace('"form"', '"forms"'))
    print(f"   ✓ Broken edit reported: {broken.error}")
    print(f"   ✓ Questions kept: {len(broken.questions)}")

    # =========================================================================
    # STEP 4: Responses
    # =========================================================================
    print("\n4. RESPONSES...")
    responses = {0: "Blue", 2: ["Option 1", "Option 2"]}
    print(f"   ✓ Visible: {sorted(i + 1 for i in resolve_visible(state.questions, responses))}")
    for result in evaluate_quotas(state.questions, responses):
        print(f"   ✓ Quota Q{result.question_index + 1}: count={result.count} passed={result.passed}")
    document = build_response_document(state.questions, responses, form_id="demo")
    print(f"   ✓ Answers recorded: {len(document['answers'])}")

    # =========================================================================
    # STEP 5: Analysis
    # =========================================================================
    print("\n5. ANALYSIS:")
    print("-" * 80)
    report = analyze_form(state.questions)
    print(f"   Unconditional: {sorted(i + 1 for i in report.unconditional)}")
    print(f"   Conditional: {sorted(i + 1 for i in report.conditional)}")
    print(f"   Warnings: {report.warnings or 'none'}")

    print("\n" + "=" * 80)
    print("DEMO COMPLETE")
    print("=" * 80)


if __name__ == "__main__":
    main()
