"""
Form Analyzer: diagnostics for a canonical question list.

This module provides lightweight analysis of a form:
    - Conditional vs unconditional questions
    - Rule references that the merger would drop
    - Duplicate option values (rules cannot tell them apart)
    - Reachability of conditional questions and logic cycles
    - Quotas that can never pass

IMPORTANT: This is an analysis layer. It does NOT modify the questions.
It only produces read-only reports.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from formsync.model import Question
from formsync.visibility import conditional_indices


def _find_cycle_dfs(graph: Dict[int, List[int]], start: int, visited: Set[int],
                    rec_stack: Set[int], path: List[int]) -> Optional[List[int]]:
    """DFS to find a cycle starting from a node."""
    visited.add(start)
    rec_stack.add(start)
    path.append(start)

    for neighbor in graph.get(start, []):
        if neighbor not in visited:
            cycle = _find_cycle_dfs(graph, neighbor, visited, rec_stack, path[:])
            if cycle:
                return cycle
        elif neighbor in rec_stack:
            cycle_start_idx = path.index(neighbor)
            return path[cycle_start_idx:] + [neighbor]

    rec_stack.remove(start)
    return None


@dataclass
class FormReport:
    """Analysis report for a form."""

    total_questions: int = 0
    total_rules: int = 0
    total_quotas: int = 0

    unconditional: Set[int] = field(default_factory=set)
    conditional: Set[int] = field(default_factory=set)

    # (question index, option) pairs
    dangling_rules: List[Tuple[int, str]] = field(default_factory=list)
    self_references: List[Tuple[int, str]] = field(default_factory=list)
    # (question index, option, target)
    out_of_range_targets: List[Tuple[int, str, int]] = field(default_factory=list)
    # question index -> duplicated values
    duplicate_options: Dict[int, List[str]] = field(default_factory=dict)
    unset_quotas: List[int] = field(default_factory=list)

    unreachable: Set[int] = field(default_factory=set)
    has_cycles: bool = False
    cycle_example: Optional[List[int]] = None

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def _numbers(indices) -> str:
    return ", ".join(str(i + 1) for i in sorted(indices))


def analyze_form(questions: List[Question]) -> FormReport:
    """
    Analyze a canonical question list.

    Question numbers in warnings are 1-based, as shown in the editor.
    """
    report = FormReport(total_questions=len(questions))
    count = len(questions)

    # =========================================================================
    # 1. RULE REFERENCES
    # =========================================================================

    edges: Dict[int, List[int]] = defaultdict(list)
    for index, question in enumerate(questions):
        if question.quota is not None:
            report.total_quotas += 1
            if question.quota.value is None:
                report.unset_quotas.append(index)

        for rule in question.logic:
            report.total_rules += 1
            if rule.option not in question.options:
                report.dangling_rules.append((index, rule.option))
            for target in rule.show_questions:
                if target == index:
                    report.self_references.append((index, rule.option))
                elif not 0 <= target < count:
                    report.out_of_range_targets.append((index, rule.option, target))
                elif target not in edges[index]:
                    edges[index].append(target)

        seen: Set[str] = set()
        duplicates: List[str] = []
        for option in question.options:
            if option in seen and option not in duplicates:
                duplicates.append(option)
            seen.add(option)
        if duplicates:
            report.duplicate_options[index] = duplicates

    # =========================================================================
    # 2. VISIBILITY CLASSES AND REACHABILITY
    # =========================================================================

    report.conditional = {i for i in conditional_indices(questions) if 0 <= i < count}
    report.unconditional = set(range(count)) - report.conditional

    reachable: Set[int] = set()
    stack = list(report.unconditional)
    while stack:
        node = stack.pop()
        if node in reachable:
            continue
        reachable.add(node)
        for neighbor in edges.get(node, []):
            if neighbor not in reachable:
                stack.append(neighbor)
    report.unreachable = report.conditional - reachable

    visited: Set[int] = set()
    for node in list(edges.keys()):
        if node not in visited:
            cycle = _find_cycle_dfs(edges, node, visited, set(), [])
            if cycle:
                report.has_cycles = True
                report.cycle_example = cycle
                break

    # =========================================================================
    # 3. WARNING FLAGS
    # =========================================================================

    if report.dangling_rules:
        report.add_warning(
            "Rules for missing options: "
            + ", ".join(f"Q{i + 1} {opt!r}" for i, opt in report.dangling_rules)
        )

    if report.self_references:
        report.add_warning(
            "Questions that try to show themselves: " + _numbers({i for i, _ in report.self_references})
        )

    if report.out_of_range_targets:
        report.add_warning(
            "Rules pointing past the last question: "
            + ", ".join(f"Q{i + 1} {opt!r} -> {t + 1}" for i, opt, t in report.out_of_range_targets)
        )

    for index, values in sorted(report.duplicate_options.items()):
        report.add_warning(
            f"Q{index + 1} repeats option values {values}; rules cannot tell them apart"
        )

    if report.unreachable:
        report.add_warning(f"Questions that can never be shown: {_numbers(report.unreachable)}")

    if report.has_cycles:
        report.add_warning(
            "Logic cycle: " + " -> ".join(f"Q{i + 1}" for i in report.cycle_example)
        )

    if report.unset_quotas:
        report.add_warning(f"Quotas without a value (never pass): {_numbers(report.unset_quotas)}")

    return report


__all__ = ["FormReport", "analyze_form"]
