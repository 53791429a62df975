"""Demo classroom seeded into an empty Data Store on first start.

One AP Biology class (join code DEMO42) with a research-paper project,
three knowledge items and rules at all three scopes, so a fresh install
can be tried from the student side right away.
"""

import logging
from datetime import date

from eduai.hooks.interfaces import Clock
from eduai.ids import new_id
from eduai.schemas import DataStore, KnowledgeItem, Project, SchoolClass

logger = logging.getLogger(__name__)

DEMO_CLASS_CODE = "DEMO42"


def seed_demo_data(store: DataStore, clock: Clock) -> None:
    """Adds the demo class, project, knowledge and rules to ``store``.

    The caller is responsible for saving the store afterwards.
    """
    now = clock.now()

    demo_class = SchoolClass(
        id=new_id(),
        name="AP Biology",
        subject="Biology",
        grade="11th Grade",
        description=(
            "Advanced Placement Biology course covering molecular biology, "
            "genetics, and ecology"
        ),
        code=DEMO_CLASS_CODE,
        created_at=now,
    )
    store.classes.append(demo_class)

    demo_project = Project(
        id=new_id(),
        class_id=demo_class.id,
        name="Cell Structure Research Paper",
        due_date=date(2026, 3, 15),
        description="Research paper on eukaryotic cell structures and organelle functions",
        created_at=now,
    )
    store.projects.append(demo_project)

    store.knowledge.extend([
        KnowledgeItem(
            id=new_id(),
            class_id=demo_class.id,
            project_id=demo_project.id,
            question="When is the research paper due?",
            answer=(
                "The cell structure research paper is due on March 15, 2026 at "
                "11:59 PM. Submit via Google Classroom."
            ),
            tags=["deadline", "assignment"],
            created_at=now,
        ),
        KnowledgeItem(
            id=new_id(),
            class_id=demo_class.id,
            project_id=None,
            question="What are the office hours?",
            answer=(
                "Office hours are Monday and Wednesday 3:00-4:00 PM in Room 201. "
                "You can also schedule appointments via email."
            ),
            tags=["office hours", "help"],
            created_at=now,
        ),
        KnowledgeItem(
            id=new_id(),
            class_id=demo_class.id,
            project_id=demo_project.id,
            question="How long should the research paper be?",
            answer=(
                "The research paper should be 5-7 pages, double-spaced, using APA "
                "format with at least 5 scholarly sources."
            ),
            tags=["requirements", "assignment"],
            created_at=now,
        ),
    ])

    store.rules.global_rules = (
        "Always be encouraging and supportive. Guide students to think critically "
        "rather than giving direct answers. If a student seems frustrated, remind "
        "them help is available during office hours."
    )
    store.rules.classes[demo_class.id] = (
        "Focus on helping students understand biological concepts deeply. "
        "Encourage them to make connections between different topics. Reference "
        "the textbook chapters when appropriate."
    )
    store.rules.projects[demo_project.id] = (
        "For the research paper, guide students on research methodology and "
        "source evaluation. Don't write content for them, but help them organize "
        "their thoughts and understand the grading rubric."
    )

    logger.info("Seeded demo class %s (code %s)", demo_class.id, DEMO_CLASS_CODE)
