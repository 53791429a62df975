"""Classroom actions — classes, projects, knowledge, rules, students.

ClassroomService is the only code path that mutates classroom entities in
the Data Store. Every mutating method validates first, raises a
ClassroomError without touching state when validation or lookup fails,
and saves the whole store through the persistence hook when it succeeds.

Cascades:
- Deleting a class deletes its projects, knowledge items and students.
- Deleting a project keeps its knowledge items but nulls their project_id.

Consumed by:
- Teacher and auth routes (eduai.api.teacher, eduai.api.auth)
- AssistantEngine for class/project lookups

Service module: imports from hooks/interfaces, knowledge/filter, ledger,
errors, ids and schemas.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from eduai.classroom.errors import NotFound, ValidationFailed
from eduai.classroom.ledger import log_activity
from eduai.hooks.interfaces import Clock, StorePersistence
from eduai.ids import new_class_code, new_id
from eduai.knowledge.filter import FilterMode, filter_knowledge, search_knowledge
from eduai.schemas import (
    ActivityEntry,
    DataStore,
    KnowledgeItem,
    Project,
    RuleScope,
    SchoolClass,
    Student,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassSummary:
    """A class with the counts shown on its dashboard card."""

    school_class: SchoolClass
    student_count: int
    project_count: int
    knowledge_count: int


def _required(**fields: str | None) -> dict[str, str]:
    """Trims the given fields and fails if any is blank."""
    cleaned = {name: (value or "").strip() for name, value in fields.items()}
    missing = [name for name, value in cleaned.items() if not value]
    if missing:
        raise ValidationFailed(
            f"Please fill in required fields: {', '.join(missing)}."
        )
    return cleaned


def parse_tags(tags: str | Iterable[str] | None) -> list[str]:
    """Normalizes tags from comma-separated text or a list.

    Each tag is trimmed; empty tags are dropped; order is kept.
    """
    if not tags:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    return [tag.strip() for tag in tags if tag and tag.strip()]


class ClassroomService:
    """Teacher and student actions over one Data Store.

    Args:
        store: The process-wide Data Store (mutated in place).
        persistence: Where the store is saved after each mutation.
        clock: Source of created_at/joined_at/activity timestamps.
    """

    def __init__(
        self,
        store: DataStore,
        persistence: StorePersistence,
        clock: Clock,
    ) -> None:
        self.store = store
        self._persistence = persistence
        self._clock = clock

    def save(self) -> None:
        """Writes the whole store through the persistence hook."""
        self._persistence.save(self.store)

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------

    def get_class(self, class_id: str) -> SchoolClass:
        for school_class in self.store.classes:
            if school_class.id == class_id:
                return school_class
        raise NotFound(f"Class '{class_id}' not found.", code="CLASS_NOT_FOUND")

    def get_project(self, project_id: str) -> Project:
        for project in self.store.projects:
            if project.id == project_id:
                return project
        raise NotFound(f"Project '{project_id}' not found.", code="PROJECT_NOT_FOUND")

    def get_knowledge(self, knowledge_id: str) -> KnowledgeItem:
        for item in self.store.knowledge:
            if item.id == knowledge_id:
                return item
        raise NotFound(
            f"Knowledge item '{knowledge_id}' not found.", code="KNOWLEDGE_NOT_FOUND"
        )

    def get_class_project(self, class_id: str, project_id: str) -> Project:
        """Returns a project, which must belong to ``class_id``."""
        project = self.get_project(project_id)
        if project.class_id != class_id:
            raise NotFound(
                f"Project '{project_id}' not found in this class.",
                code="PROJECT_NOT_FOUND",
            )
        return project

    # -------------------------------------------------------------------
    # Classes
    # -------------------------------------------------------------------

    def create_class(
        self,
        name: str,
        subject: str,
        grade: str = "",
        description: str = "",
    ) -> SchoolClass:
        """Creates a class with a fresh, unique join code.

        Raises:
            ValidationFailed: If name or subject is blank.
        """
        fields = _required(name=name, subject=subject)
        school_class = SchoolClass(
            id=new_id(),
            name=fields["name"],
            subject=fields["subject"],
            grade=(grade or "").strip(),
            description=(description or "").strip(),
            code=new_class_code({c.code for c in self.store.classes}),
            created_at=self._clock.now(),
        )
        self.store.classes.append(school_class)
        self.save()
        logger.info("Class created: %s (%s)", school_class.id, school_class.code)
        return school_class

    def delete_class(self, class_id: str) -> None:
        """Deletes a class with its projects, knowledge and students.

        Raises:
            NotFound: If the class does not exist.
        """
        self.get_class(class_id)
        self.store.classes = [c for c in self.store.classes if c.id != class_id]
        self.store.projects = [p for p in self.store.projects if p.class_id != class_id]
        self.store.knowledge = [k for k in self.store.knowledge if k.class_id != class_id]
        self.store.students = [s for s in self.store.students if s.class_id != class_id]
        self.save()
        logger.info("Class deleted: %s", class_id)

    def class_summaries(self) -> list[ClassSummary]:
        """All classes with their student, project and knowledge counts."""
        return [self._summarize(c) for c in self.store.classes]

    def recent_classes(self, limit: int = 3) -> list[ClassSummary]:
        """The most recently created classes, newest first."""
        if limit <= 0:
            return []
        return [self._summarize(c) for c in reversed(self.store.classes[-limit:])]

    def _summarize(self, school_class: SchoolClass) -> ClassSummary:
        return ClassSummary(
            school_class=school_class,
            student_count=sum(1 for s in self.store.students if s.class_id == school_class.id),
            project_count=sum(1 for p in self.store.projects if p.class_id == school_class.id),
            knowledge_count=sum(1 for k in self.store.knowledge if k.class_id == school_class.id),
        )

    # -------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------

    def create_project(
        self,
        class_id: str,
        name: str,
        due_date: date | None = None,
        description: str = "",
    ) -> Project:
        """Creates a project in a class and logs the activity.

        Raises:
            ValidationFailed: If class_id or name is blank.
            NotFound: If the class does not exist.
        """
        fields = _required(class_id=class_id, name=name)
        self.get_class(fields["class_id"])

        now = self._clock.now()
        project = Project(
            id=new_id(),
            class_id=fields["class_id"],
            name=fields["name"],
            due_date=due_date,
            description=(description or "").strip(),
            created_at=now,
        )
        self.store.projects.append(project)
        log_activity(
            self.store,
            ActivityEntry(
                type="project_created",
                class_id=project.class_id,
                project_name=project.name,
                timestamp=now,
            ),
        )
        self.save()
        logger.info("Project created: %s in class %s", project.id, project.class_id)
        return project

    def delete_project(self, project_id: str) -> None:
        """Deletes a project; its knowledge items become class-wide.

        Raises:
            NotFound: If the project does not exist.
        """
        self.get_project(project_id)
        for item in self.store.knowledge:
            if item.project_id == project_id:
                item.project_id = None
        self.store.projects = [p for p in self.store.projects if p.id != project_id]
        self.save()
        logger.info("Project deleted: %s", project_id)

    def list_projects(self, class_id: str | None = None) -> list[Project]:
        if not class_id:
            return list(self.store.projects)
        return [p for p in self.store.projects if p.class_id == class_id]

    # -------------------------------------------------------------------
    # Knowledge
    # -------------------------------------------------------------------

    def add_knowledge(
        self,
        class_id: str,
        question: str,
        answer: str,
        project_id: str | None = None,
        tags: str | Iterable[str] | None = None,
    ) -> KnowledgeItem:
        """Adds a question/answer pair to a class, optionally to a project.

        Raises:
            ValidationFailed: If class_id, question or answer is blank.
            NotFound: If the class, or the project within it, does not exist.
        """
        fields = _required(class_id=class_id, question=question, answer=answer)
        self.get_class(fields["class_id"])
        if project_id:
            self.get_class_project(fields["class_id"], project_id)

        now = self._clock.now()
        item = KnowledgeItem(
            id=new_id(),
            class_id=fields["class_id"],
            project_id=project_id or None,
            question=fields["question"],
            answer=fields["answer"],
            tags=parse_tags(tags),
            created_at=now,
        )
        self.store.knowledge.append(item)
        log_activity(
            self.store,
            ActivityEntry(type="knowledge_added", class_id=item.class_id, timestamp=now),
        )
        self.save()
        return item

    def edit_knowledge(self, knowledge_id: str, question: str, answer: str) -> KnowledgeItem:
        """Replaces question and answer of an item in place.

        Raises:
            NotFound: If the item does not exist.
            ValidationFailed: If the trimmed question or answer is blank.
        """
        item = self.get_knowledge(knowledge_id)
        fields = _required(question=question, answer=answer)
        item.question = fields["question"]
        item.answer = fields["answer"]
        self.save()
        return item

    def delete_knowledge(self, knowledge_id: str) -> None:
        """Removes a knowledge item.

        Raises:
            NotFound: If the item does not exist.
        """
        self.get_knowledge(knowledge_id)
        self.store.knowledge = [k for k in self.store.knowledge if k.id != knowledge_id]
        self.save()

    def list_knowledge(
        self,
        class_id: str | None = None,
        project_id: str | None = None,
        search: str | None = None,
    ) -> list[KnowledgeItem]:
        """Catalog view: strict project match, optional search."""
        if class_id:
            return filter_knowledge(
                self.store.knowledge,
                class_id,
                project_id=project_id,
                query=search,
                mode=FilterMode.SCOPED,
            )
        items = self.store.knowledge
        if project_id:
            items = [k for k in items if k.project_id == project_id]
        return search_knowledge(items, search)

    # -------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------

    def get_rules(self, scope: RuleScope, target_id: str | None = None) -> str:
        """Returns the rule text of one scope ("" when unset)."""
        rules = self.store.rules
        if scope is RuleScope.GLOBAL:
            return rules.global_rules
        if not target_id:
            return ""
        if scope is RuleScope.CLASS:
            return rules.classes.get(target_id, "")
        return rules.projects.get(target_id, "")

    def save_rules(
        self, scope: RuleScope, text: str, target_id: str | None = None
    ) -> None:
        """Stores the rule text of one scope. Empty text clears the override.

        Raises:
            ValidationFailed: If a class/project scope has no target.
            NotFound: If the target class/project does not exist.
        """
        rules = self.store.rules
        if scope is RuleScope.GLOBAL:
            rules.global_rules = text or ""
        elif scope is RuleScope.CLASS:
            if not target_id:
                raise ValidationFailed("Select a class first.")
            self.get_class(target_id)
            rules.classes[target_id] = text or ""
        else:
            if not target_id:
                raise ValidationFailed("Select a project first.")
            self.get_project(target_id)
            rules.projects[target_id] = text or ""
        self.save()

    # -------------------------------------------------------------------
    # Students
    # -------------------------------------------------------------------

    def find_class_by_code(self, code: str) -> SchoolClass:
        """Resolves a join code (case-insensitive).

        Raises:
            NotFound: With code INVALID_CLASS_CODE if no class uses it.
        """
        normalized = (code or "").strip().upper()
        for school_class in self.store.classes:
            if school_class.code == normalized:
                return school_class
        raise NotFound("Invalid class code.", code="INVALID_CLASS_CODE")

    def join_class(self, name: str, code: str) -> Student:
        """Signs a student into a class by name and class code.

        A returning student (same name, same code) gets their existing
        record back; otherwise a new student is created and the join is
        logged in the activity feed.

        Raises:
            ValidationFailed: If name or code is blank.
            NotFound: If the code matches no class.
        """
        fields = _required(name=name, code=code)
        school_class = self.find_class_by_code(fields["code"])

        for student in self.store.students:
            if student.name == fields["name"] and student.class_code == school_class.code:
                return student

        now = self._clock.now()
        student = Student(
            id=new_id(),
            name=fields["name"],
            class_code=school_class.code,
            class_id=school_class.id,
            class_name=school_class.name,
            joined_at=now,
        )
        self.store.students.append(student)
        log_activity(
            self.store,
            ActivityEntry(
                type="student_joined",
                class_id=school_class.id,
                student_name=student.name,
                timestamp=now,
            ),
        )
        self.save()
        logger.info("Student %s joined class %s", student.id, school_class.id)
        return student

    def list_students(self, class_id: str | None = None) -> list[Student]:
        if not class_id:
            return list(self.store.students)
        return [s for s in self.store.students if s.class_id == class_id]

    # -------------------------------------------------------------------
    # Dashboard
    # -------------------------------------------------------------------

    def stats(self) -> dict[str, int]:
        """Entity counts for the teacher overview."""
        return {
            "classes": len(self.store.classes),
            "students": len(self.store.students),
            "projects": len(self.store.projects),
            "knowledge": len(self.store.knowledge),
        }
