import unittest

from commit_organizer.grouping.group_model import Category, ChangeGroup
from commit_organizer.reader.change_record import ChangeRecord, ChangeStatus
from commit_organizer.sequencing.commit_message import (
    BODY_WRAP_WIDTH,
    SUBJECT_MAX_LENGTH,
    CommitMessage,
    build_body,
    build_commit_message,
    build_subject,
)


def make_group(category, paths, summary, scope=""):
    members = tuple(ChangeRecord(path=p, status=ChangeStatus.MODIFIED) for p in paths)
    return ChangeGroup(category=category, members=members, summary=summary, scope=scope)


class TestBuildSubject(unittest.TestCase):
    def test_short_summary_is_kept(self) -> None:
        self.assertEqual(build_subject("Fix auth.ts"), "Fix auth.ts")

    def test_capitalized_without_trailing_period(self) -> None:
        self.assertEqual(build_subject("update docs.  "), "Update docs")
        self.assertEqual(build_subject("fix   the\nparser..."), "Fix the parser")

    def test_long_paths_are_reduced_to_their_last_component(self) -> None:
        summary = "Update documentation in docs/reference/api/v2/endpoints"
        self.assertEqual(build_subject(summary), "Update documentation in endpoints")

    def test_long_subject_is_cut_at_a_word_boundary(self) -> None:
        summary = "Refactor the connection pool and the retry scheduler for outbound requests"
        subject = build_subject(summary)
        self.assertLessEqual(len(subject), SUBJECT_MAX_LENGTH)
        self.assertTrue(summary.startswith(subject))
        self.assertFalse(subject.endswith(" "))

    def test_cut_target_does_not_leave_a_dangling_preposition(self) -> None:
        file_name = "release-notes-for-the-spring-platform-update.md"
        subject = build_subject(f"Update documentation in {file_name}")
        self.assertLessEqual(len(subject), SUBJECT_MAX_LENGTH)
        self.assertEqual(subject, "Update documentation in release-notes-for-the-spri")

    def test_dangling_words_are_dropped_without_room_for_the_target(self) -> None:
        summary = "Refactor the connection pooling layer and the " + "z" * 30
        subject = build_subject(summary)
        self.assertEqual(subject, "Refactor the connection pooling layer")

    def test_single_long_word_is_truncated(self) -> None:
        subject = build_subject("Add " + "x" * 80)
        self.assertLessEqual(len(subject), SUBJECT_MAX_LENGTH)
        self.assertTrue(subject.startswith("Add"))


class TestBuildBody(unittest.TestCase):
    def test_single_member_has_no_body(self) -> None:
        group = make_group(Category.FIX, ["src/auth.ts"], "Fix auth.ts", "src")
        self.assertIsNone(build_body(group))
        message = build_commit_message(group)
        self.assertEqual(str(message), "Fix auth.ts")

    def test_body_lists_members_and_wraps(self) -> None:
        long_path = "src/" + "/".join(["deeply-nested-directory"] * 4) + "/module.py"
        group = make_group(Category.DOCS, ["README.md", "CHANGELOG.md", long_path], "Update documentation")
        body = build_body(group)

        self.assertTrue(body.startswith("Documentation changes across 3 files in the repository root."))
        self.assertIn("- modified README.md", body)
        self.assertIn("- modified CHANGELOG.md", body)
        lines = body.splitlines()
        for line in lines:
            self.assertLessEqual(len(line), BODY_WRAP_WIDTH)
        # The long path continues on indented lines, split after a "/"
        start = lines.index("- modified src/" + "deeply-nested-directory/" * 2)
        self.assertEqual(lines[start + 1], "  " + "deeply-nested-directory/" * 2 + "module.py")

    def test_path_component_longer_than_a_line_is_split(self) -> None:
        long_name = "x" * 100 + ".py"
        group = make_group(Category.FEATURE, ["a.py", long_name], "Add files")
        lines = build_body(group).splitlines()
        for line in lines:
            self.assertLessEqual(len(line), BODY_WRAP_WIDTH)
        tail = lines[lines.index("- modified a.py") + 1:]
        self.assertEqual(tail[0], "- modified")
        self.assertEqual("".join(line.strip() for line in tail[1:]), long_name)

    def test_message_joins_subject_and_body(self) -> None:
        group = make_group(Category.FIX, ["src/a.py", "src/b.py"], "Fix src", "src")
        message = build_commit_message(group)
        subject, blank, *body = str(message).split("\n")
        self.assertEqual(subject, "Fix src")
        self.assertEqual(blank, "")
        self.assertEqual(body[0], "Fix changes across 2 files in src.")

    def test_commit_message_str_without_body(self) -> None:
        self.assertEqual(str(CommitMessage(subject="Add tests")), "Add tests")


if __name__ == "__main__":
    unittest.main()
