"""Tests for eduai.classroom.service — teacher and student actions."""

from datetime import date

import pytest

from eduai.classroom.errors import NotFound, ValidationFailed
from eduai.classroom.service import parse_tags
from eduai.ids import CLASS_CODE_ALPHABET, CLASS_CODE_LENGTH
from eduai.schemas import RuleScope


@pytest.fixture
def bio(classroom):
    return classroom.create_class("AP Biology", "Biology", grade="11th", description="Cells")


# ---------------------------------------------------------------------------
# Classes
# ---------------------------------------------------------------------------


class TestClasses:
    def test_create_trims_and_generates_code(self, classroom, fixed_clock) -> None:
        school_class = classroom.create_class("  Chemistry ", " Science ")
        assert school_class.name == "Chemistry"
        assert school_class.subject == "Science"
        assert len(school_class.code) == CLASS_CODE_LENGTH
        assert set(school_class.code) <= set(CLASS_CODE_ALPHABET)
        assert school_class.created_at == fixed_clock.now()

    def test_create_saves(self, classroom, persistence) -> None:
        classroom.create_class("Chemistry", "Science")
        assert persistence.save_count == 1
        assert len(persistence.load().classes) == 1

    @pytest.mark.parametrize("name,subject", [("", "Science"), ("Chem", "  "), (None, None)])
    def test_create_requires_name_and_subject(self, classroom, persistence, name, subject) -> None:
        with pytest.raises(ValidationFailed) as exc_info:
            classroom.create_class(name, subject)
        assert exc_info.value.status_code == 422
        assert classroom.store.classes == []
        assert persistence.save_count == 0

    def test_codes_are_unique(self, classroom) -> None:
        codes = {classroom.create_class(f"C{i}", "S").code for i in range(20)}
        assert len(codes) == 20

    def test_delete_cascades(self, classroom, bio) -> None:
        other = classroom.create_class("History", "Social")
        project = classroom.create_project(bio.id, "Paper")
        classroom.add_knowledge(bio.id, "Q?", "A.", project_id=project.id)
        classroom.add_knowledge(other.id, "Other Q?", "Other A.")
        classroom.join_class("Ada", bio.code)
        classroom.join_class("Bob", other.code)

        classroom.delete_class(bio.id)

        store = classroom.store
        assert [c.id for c in store.classes] == [other.id]
        assert store.projects == []
        assert [k.class_id for k in store.knowledge] == [other.id]
        assert [s.name for s in store.students] == ["Bob"]

    def test_delete_unknown_class(self, classroom) -> None:
        with pytest.raises(NotFound) as exc_info:
            classroom.delete_class("missing")
        assert exc_info.value.code == "CLASS_NOT_FOUND"

    def test_summaries_count_per_class(self, classroom, bio) -> None:
        classroom.create_project(bio.id, "Paper")
        classroom.add_knowledge(bio.id, "Q?", "A.")
        classroom.add_knowledge(bio.id, "Q2?", "A2.")
        classroom.join_class("Ada", bio.code)

        [summary] = classroom.class_summaries()
        assert summary.school_class.id == bio.id
        assert (summary.student_count, summary.project_count, summary.knowledge_count) == (1, 1, 2)

    def test_recent_classes_newest_first(self, classroom) -> None:
        for name in ("A", "B", "C", "D"):
            classroom.create_class(name, "S")
        assert [s.school_class.name for s in classroom.recent_classes()] == ["D", "C", "B"]


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


class TestProjects:
    def test_create_logs_activity(self, classroom, bio) -> None:
        project = classroom.create_project(bio.id, "Paper", due_date=date(2026, 3, 15))
        assert project.due_date == date(2026, 3, 15)
        entry = classroom.store.activity[-1]
        assert entry.type == "project_created"
        assert entry.project_name == "Paper"

    def test_create_requires_existing_class(self, classroom) -> None:
        with pytest.raises(NotFound):
            classroom.create_project("missing", "Paper")

    def test_create_requires_name(self, classroom, bio) -> None:
        with pytest.raises(ValidationFailed):
            classroom.create_project(bio.id, " ")

    def test_delete_nulls_knowledge_project(self, classroom, bio) -> None:
        project = classroom.create_project(bio.id, "Paper")
        item = classroom.add_knowledge(bio.id, "Q?", "A.", project_id=project.id)

        classroom.delete_project(project.id)

        assert classroom.store.projects == []
        assert classroom.get_knowledge(item.id).project_id is None

    def test_list_by_class(self, classroom, bio) -> None:
        other = classroom.create_class("History", "Social")
        classroom.create_project(bio.id, "Paper")
        classroom.create_project(other.id, "Essay")
        assert [p.name for p in classroom.list_projects(bio.id)] == ["Paper"]
        assert len(classroom.list_projects()) == 2


# ---------------------------------------------------------------------------
# Knowledge
# ---------------------------------------------------------------------------


class TestKnowledge:
    def test_add_parses_tags(self, classroom, bio) -> None:
        item = classroom.add_knowledge(bio.id, " Q? ", " A. ", tags=" deadline, ,paper ")
        assert item.question == "Q?"
        assert item.answer == "A."
        assert item.tags == ["deadline", "paper"]
        assert classroom.store.activity[-1].type == "knowledge_added"

    def test_add_requires_fields(self, classroom, bio) -> None:
        with pytest.raises(ValidationFailed):
            classroom.add_knowledge(bio.id, "Q?", "   ")
        assert classroom.store.knowledge == []

    def test_add_rejects_project_of_other_class(self, classroom, bio) -> None:
        other = classroom.create_class("History", "Social")
        project = classroom.create_project(other.id, "Essay")
        with pytest.raises(NotFound) as exc_info:
            classroom.add_knowledge(bio.id, "Q?", "A.", project_id=project.id)
        assert exc_info.value.code == "PROJECT_NOT_FOUND"

    def test_edit_in_place(self, classroom, bio) -> None:
        item = classroom.add_knowledge(bio.id, "Q?", "A.")
        edited = classroom.edit_knowledge(item.id, " New Q? ", " New A. ")
        assert edited is classroom.store.knowledge[0]
        assert (edited.question, edited.answer) == ("New Q?", "New A.")

    def test_edit_rejects_blank(self, classroom, bio) -> None:
        item = classroom.add_knowledge(bio.id, "Q?", "A.")
        with pytest.raises(ValidationFailed):
            classroom.edit_knowledge(item.id, "  ", "A.")
        assert classroom.get_knowledge(item.id).question == "Q?"

    def test_edit_unknown(self, classroom) -> None:
        with pytest.raises(NotFound) as exc_info:
            classroom.edit_knowledge("missing", "Q?", "A.")
        assert exc_info.value.code == "KNOWLEDGE_NOT_FOUND"

    def test_delete(self, classroom, bio) -> None:
        item = classroom.add_knowledge(bio.id, "Q?", "A.")
        classroom.delete_knowledge(item.id)
        assert classroom.store.knowledge == []

    def test_list_is_scoped(self, classroom, bio) -> None:
        project = classroom.create_project(bio.id, "Paper")
        classroom.add_knowledge(bio.id, "Class-wide?", "A.")
        classroom.add_knowledge(bio.id, "In project?", "B.", project_id=project.id)

        scoped = classroom.list_knowledge(bio.id, project.id)
        assert [k.question for k in scoped] == ["In project?"]

    def test_list_all_classes_with_search(self, classroom, bio) -> None:
        other = classroom.create_class("History", "Social")
        classroom.add_knowledge(bio.id, "Lab coat?", "Yes.")
        classroom.add_knowledge(other.id, "Lab trip?", "No.")
        classroom.add_knowledge(other.id, "Essay?", "Maybe.")
        assert len(classroom.list_knowledge(search="lab")) == 2


class TestParseTags:
    def test_list_input(self) -> None:
        assert parse_tags([" a ", "", "b"]) == ["a", "b"]

    def test_empty(self) -> None:
        assert parse_tags("") == []
        assert parse_tags(None) == []


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


class TestRules:
    def test_global(self, classroom) -> None:
        classroom.save_rules(RuleScope.GLOBAL, "Be kind.")
        assert classroom.get_rules(RuleScope.GLOBAL) == "Be kind."
        assert classroom.store.rules.global_rules == "Be kind."

    def test_class_scope(self, classroom, bio) -> None:
        classroom.save_rules(RuleScope.CLASS, "Cite.", bio.id)
        assert classroom.get_rules(RuleScope.CLASS, bio.id) == "Cite."
        assert classroom.get_rules(RuleScope.CLASS, "other") == ""

    def test_project_scope(self, classroom, bio) -> None:
        project = classroom.create_project(bio.id, "Paper")
        classroom.save_rules(RuleScope.PROJECT, "Outline first.", project.id)
        assert classroom.store.rules.projects == {project.id: "Outline first."}

    def test_class_scope_needs_target(self, classroom) -> None:
        with pytest.raises(ValidationFailed, match="Select a class first."):
            classroom.save_rules(RuleScope.CLASS, "x")

    def test_project_scope_needs_existing_project(self, classroom) -> None:
        with pytest.raises(NotFound):
            classroom.save_rules(RuleScope.PROJECT, "x", "missing")

    def test_empty_text_clears(self, classroom, bio) -> None:
        classroom.save_rules(RuleScope.CLASS, "Cite.", bio.id)
        classroom.save_rules(RuleScope.CLASS, "", bio.id)
        assert classroom.get_rules(RuleScope.CLASS, bio.id) == ""


# ---------------------------------------------------------------------------
# Students
# ---------------------------------------------------------------------------


class TestStudents:
    def test_join_is_case_insensitive(self, classroom, bio) -> None:
        student = classroom.join_class("Ada", bio.code.lower())
        assert student.class_id == bio.id
        assert student.class_name == "AP Biology"
        assert student.class_code == bio.code
        assert classroom.store.activity[-1].type == "student_joined"
        assert classroom.store.activity[-1].student_name == "Ada"

    def test_rejoin_reuses_student(self, classroom, bio) -> None:
        first = classroom.join_class("Ada", bio.code)
        again = classroom.join_class("Ada", bio.code)
        assert again.id == first.id
        assert len(classroom.store.students) == 1
        assert len(classroom.store.activity) == 1

    def test_invalid_code(self, classroom, bio) -> None:
        with pytest.raises(NotFound) as exc_info:
            classroom.join_class("Ada", "ZZZZZZ")
        assert exc_info.value.code == "INVALID_CLASS_CODE"
        assert classroom.store.students == []

    def test_join_requires_name(self, classroom, bio) -> None:
        with pytest.raises(ValidationFailed):
            classroom.join_class("  ", bio.code)

    def test_list_by_class(self, classroom, bio) -> None:
        other = classroom.create_class("History", "Social")
        classroom.join_class("Ada", bio.code)
        classroom.join_class("Bob", other.code)
        assert [s.name for s in classroom.list_students(bio.id)] == ["Ada"]


class TestStats:
    def test_counts(self, classroom, bio) -> None:
        classroom.create_project(bio.id, "Paper")
        classroom.add_knowledge(bio.id, "Q?", "A.")
        classroom.join_class("Ada", bio.code)
        assert classroom.stats() == {
            "classes": 1, "students": 1, "projects": 1, "knowledge": 1,
        }
