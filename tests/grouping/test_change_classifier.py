import unittest

from commit_organizer.grouping.change_classifier import CATEGORY_PRECEDENCE, classify_change, detect_categories
from commit_organizer.grouping.group_model import Category
from commit_organizer.reader.change_record import ChangeRecord, ChangeStatus


M = ChangeStatus.MODIFIED
A = ChangeStatus.ADDED
D = ChangeStatus.DELETED
U = ChangeStatus.UNTRACKED


class TestChangeClassifier(unittest.TestCase):
    def test_classify_change_cases(self) -> None:
        cases = [
            ("README.md", M, "+More docs\n", Category.DOCS),
            ("docs/guide/setup.rst", A, "", Category.DOCS),
            ("tests/test_example.py", M, "+def test_x():\n", Category.TEST),
            ("src/app/login.spec.ts", U, "", Category.TEST),
            (".github/workflows/ci.yml", M, "", Category.CONFIG),
            ("Dockerfile", M, "", Category.CONFIG),
            ("requirements-dev.txt", M, "+pytest\n", Category.CONFIG),
            ("src/module.py", M, "-    x=1\n+    x = 1\n", Category.STYLE),
            ("src/module.py", M, "+# refactor: extract helper\n", Category.REFACTOR),
            ("src/legacy.py", D, "-old\n", Category.REFACTOR),
            ("src/module.py", M, "+# fix off by one bug\n", Category.FIX),
            ("src/bugfix/retry.py", M, "+retries = 3\n", Category.FIX),
            ("src/auth.ts", M, "-  return user;\n+  return user.trim();\n", Category.FIX),
            ("src/module.py", M, "+def new_feature():\n+    return 1\n", Category.FEATURE),
            ("src/payments/stripe.py", U, "+import stripe\n", Category.FEATURE),
            ("assets/logo.png", A, "", Category.FEATURE),
        ]
        for path, status, diff, expected in cases:
            with self.subTest(path=path, diff=diff):
                record = ChangeRecord(path=path, status=status, diff_text=diff)
                self.assertEqual(classify_change(record), expected)

    def test_tie_break_prefers_more_structural_category(self) -> None:
        # A new test file under docs/ nominates docs, test and feature
        record = ChangeRecord(path="docs/tests/test_examples.py", status=ChangeStatus.UNTRACKED)
        self.assertEqual(detect_categories(record), {Category.DOCS, Category.TEST, Category.FEATURE})
        self.assertEqual(classify_change(record), Category.TEST)

    def test_config_beats_test(self) -> None:
        record = ChangeRecord(path="tests/fixtures/settings.json", status=ChangeStatus.MODIFIED)
        self.assertEqual(classify_change(record), Category.CONFIG)

    def test_refactor_beats_fix(self) -> None:
        record = ChangeRecord(
            path="src/api.py", status=ChangeStatus.MODIFIED, diff_text="+# refactor error handling, fix bug\n"
        )
        self.assertEqual(detect_categories(record), {Category.REFACTOR, Category.FIX})
        self.assertEqual(classify_change(record), Category.REFACTOR)

    def test_precedence_is_a_parameter(self) -> None:
        record = ChangeRecord(
            path="src/api.py", status=ChangeStatus.MODIFIED, diff_text="+# refactor error handling, fix bug\n"
        )
        fix_first = [Category.FIX] + [c for c in CATEGORY_PRECEDENCE if c is not Category.FIX]
        self.assertEqual(classify_change(record, precedence=fix_first), Category.FIX)

    def test_whitespace_only_new_file_is_not_style(self) -> None:
        record = ChangeRecord(path="src/empty.py", status=ChangeStatus.UNTRACKED, diff_text="+\n")
        self.assertEqual(classify_change(record), Category.FEATURE)

    def test_reindented_comment_line_is_style(self) -> None:
        for diff in (
            "--- a/db/schema.sql\n+++ b/db/schema.sql\n@@ -1 +1 @@\n--- comment\n+  -- comment\n",
            "--- comment\n+  -- comment\n",
        ):
            with self.subTest(diff=diff):
                record = ChangeRecord(path="db/schema.sql", status=ChangeStatus.MODIFIED, diff_text=diff)
                self.assertEqual(classify_change(record), Category.STYLE)

    def test_modified_without_signal_is_fix(self) -> None:
        record = ChangeRecord(path="src/auth.ts", status=ChangeStatus.MODIFIED)
        self.assertEqual(classify_change(record), Category.FIX)

    def test_default_precedence_table(self) -> None:
        self.assertEqual(
            CATEGORY_PRECEDENCE,
            (
                Category.CONFIG,
                Category.TEST,
                Category.DOCS,
                Category.STYLE,
                Category.REFACTOR,
                Category.FIX,
                Category.FEATURE,
            ),
        )


if __name__ == "__main__":
    unittest.main()
